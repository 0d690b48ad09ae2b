from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

try:  # pragma: no cover - optional dependency guard
    from phonemizer.backend import EspeakBackend  # type: ignore
    from phonemizer.backend.espeak.wrapper import EspeakWrapper  # type: ignore
except Exception:  # pragma: no cover - import fallback
    EspeakBackend = None  # type: ignore[assignment]
    EspeakWrapper = None  # type: ignore[assignment]

from phonetext.constants import PUNCTUATION

logger = logging.getLogger(__name__)

# (text, backend language code) -> phonemes
PhonemeBackend = Callable[[str, str], str]


class PhonetextError(RuntimeError):
    """Base class for errors raised by phonetext."""


class BackendUnavailableError(PhonetextError):
    """Raised when the default espeak backend cannot be loaded."""


class BackendRegistry:
    """Lazily builds one backend object per key and hands out the same one afterwards.

    Creation happens under the registry lock, so concurrent first callers
    for a key wait for the single instance instead of building their own.
    ``reset`` drops every instance; the next ``get`` rebuilds.
    """

    def __init__(self, factory: Callable[[str], Any]) -> None:
        self._factory = factory
        self._instances: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            instance = self._instances.get(key)
            if instance is not None:
                return instance
            logger.debug("Initializing backend for %s", key)
            instance = self._factory(key)
            self._instances[key] = instance
            return instance

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._instances)

    def reset(self) -> None:
        with self._lock:
            self._instances.clear()


_ESPEAK_CALL_LOCK = threading.Lock()
_LIBRARY_LOCK = threading.Lock()
_LIBRARY_CONFIGURED = False


def _configure_espeak_library() -> None:
    global _LIBRARY_CONFIGURED
    with _LIBRARY_LOCK:
        if _LIBRARY_CONFIGURED:
            return
        from phonetext.settings import get_runtime_settings

        library_path = str(get_runtime_settings().get("espeak_library") or "").strip()
        if library_path and EspeakWrapper is not None:
            logger.info("Using espeak library at %s", library_path)
            EspeakWrapper.set_library(library_path)
        _LIBRARY_CONFIGURED = True


def create_espeak_backend(language_code: str) -> Any:
    if EspeakBackend is None:
        raise BackendUnavailableError("phonemizer is required for the default espeak backend")

    _configure_espeak_library()
    try:
        return EspeakBackend(
            language_code,
            punctuation_marks=PUNCTUATION,
            preserve_punctuation=True,
            with_stress=True,
            language_switch="remove-flags",
        )
    except RuntimeError as exc:
        raise BackendUnavailableError(f"espeak could not be loaded for {language_code}: {exc}") from exc


class EspeakPhonemeBackend:
    """Converts text with espeak-ng through the ``phonemizer`` package."""

    def __init__(self, registry: Optional[BackendRegistry] = None) -> None:
        self.registry = registry or get_default_registry()

    def convert(self, text: str, language_code: str) -> str:
        backend = self.registry.get(language_code)
        # libespeak-ng keeps global state; one conversion at a time.
        with _ESPEAK_CALL_LOCK:
            lines = backend.phonemize([text], strip=True)
        return " ".join(lines)

    __call__ = convert


_DEFAULT_REGISTRY: Optional[BackendRegistry] = None
_DEFAULT_REGISTRY_LOCK = threading.Lock()


def get_default_registry() -> BackendRegistry:
    global _DEFAULT_REGISTRY
    with _DEFAULT_REGISTRY_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = BackendRegistry(create_espeak_backend)
        return _DEFAULT_REGISTRY


def reset_default_registry() -> None:
    """Tear down cached espeak backends, e.g. after changing the library path."""

    global _DEFAULT_REGISTRY, _LIBRARY_CONFIGURED
    with _DEFAULT_REGISTRY_LOCK:
        if _DEFAULT_REGISTRY is not None:
            logger.debug("Dropping espeak backends: %s", ", ".join(_DEFAULT_REGISTRY.keys()) or "none")
            _DEFAULT_REGISTRY.reset()
        _DEFAULT_REGISTRY = None
    with _LIBRARY_LOCK:
        _LIBRARY_CONFIGURED = False


def get_default_backend() -> EspeakPhonemeBackend:
    return EspeakPhonemeBackend(get_default_registry())
