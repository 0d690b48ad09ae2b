from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict, Mapping

from phonetext.utils import load_config, save_config

_SETTINGS_DEFAULTS: Dict[str, Any] = {
    "language": "a",
    "normalize": True,
    "phonemizer_workers": 1,
    "espeak_library": "",
}

_ENVIRONMENT_KEYS: Dict[str, str] = {
    "language": "PHONETEXT_LANGUAGE",
    "normalize": "PHONETEXT_NORMALIZE",
    "phonemizer_workers": "PHONETEXT_WORKERS",
    "espeak_library": "PHONEMIZER_ESPEAK_LIBRARY",
}

NORMALIZATION_SAMPLE_TEXTS: Dict[str, str] = {
    "numbers": "The ledger listed 1,204 debts totaling $57,890.25 by 1984.",
    "times": "Meet me at 2:05, not 2:00.",
    "titles": "Dr. Smith met Mr. O'Leary and Mrs. Hudson, etc.",
    "acronyms": "The U.S.A. is big.",
}


@lru_cache(maxsize=1)
def _environment_defaults() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key, env_var in _ENVIRONMENT_KEYS.items():
        default = _SETTINGS_DEFAULTS.get(key)
        value = os.environ.get(env_var)
        if value is None or value == "":
            continue
        overrides[key] = _coerce(value, default)
    return overrides


def coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        return coerce_bool(value, default)
    if isinstance(default, int):
        return _coerce_int(value, default)
    if isinstance(default, str):
        return str(value or "").strip()
    return value


def _extract_settings(source: Mapping[str, Any]) -> Dict[str, Any]:
    env_defaults = _environment_defaults()
    extracted: Dict[str, Any] = {}
    for key, default in _SETTINGS_DEFAULTS.items():
        if key in source:
            raw_value = source.get(key)
        elif key in env_defaults:
            raw_value = env_defaults[key]
        else:
            raw_value = default
        extracted[key] = _coerce(raw_value, default)
    if extracted["phonemizer_workers"] < 1:
        extracted["phonemizer_workers"] = 1
    return extracted


@lru_cache(maxsize=1)
def _cached_settings() -> Dict[str, Any]:
    config = load_config() or {}
    return _extract_settings(config)


def get_runtime_settings() -> Dict[str, Any]:
    return dict(_cached_settings())


def clear_cached_settings() -> None:
    _environment_defaults.cache_clear()
    _cached_settings.cache_clear()


def apply_overrides(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in overrides.items():
        if key not in _SETTINGS_DEFAULTS:
            continue
        merged[key] = _coerce(value, _SETTINGS_DEFAULTS[key])
    return merged


def save_settings(overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Persist known setting overrides to ``config.json`` and return the new settings.

    Keys the config file already holds but this module does not know about
    are kept as they are.
    """

    config = load_config() or {}
    updated = apply_overrides(get_runtime_settings(), overrides)
    config.update({key: updated[key] for key in _SETTINGS_DEFAULTS})
    save_config(config)
    clear_cached_settings()
    return get_runtime_settings()
