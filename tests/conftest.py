from __future__ import annotations

import pytest

from phonetext.settings import clear_cached_settings
from phonetext.utils import get_user_settings_dir

_SETTING_ENV_VARS = (
    "PHONETEXT_LANGUAGE",
    "PHONETEXT_NORMALIZE",
    "PHONETEXT_WORKERS",
    "PHONEMIZER_ESPEAK_LIBRARY",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings directory at a temp dir and drop cached settings."""

    monkeypatch.setenv("PHONETEXT_SETTINGS_DIR", str(tmp_path / "settings"))
    for name in _SETTING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_user_settings_dir.cache_clear()
    clear_cached_settings()
    yield
    get_user_settings_dir.cache_clear()
    clear_cached_settings()


class RecordingBackend:
    """Fake G2P backend: upper-cases text and records every call."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail_on = fail_on

    def convert(self, text: str, language_code: str) -> str:
        self.calls.append((text, language_code))
        if self.fail_on is not None and self.fail_on in text:
            raise RuntimeError(f"backend failed on {text!r}")
        return text.upper()


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()
