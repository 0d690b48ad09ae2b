from __future__ import annotations

import logging

import pytest

from phonetext.languages import (
    DEFAULT_LANGUAGE,
    DIALECT_PROFILES,
    VoiceLanguage,
    dialect_code,
    get_dialect_profile,
    resolve_language,
)


@pytest.mark.parametrize(
    ("selector", "expected"),
    [
        ("a", VoiceLanguage.AMERICAN),
        ("b", VoiceLanguage.BRITISH),
        ("A", VoiceLanguage.AMERICAN),
        ("en", VoiceLanguage.AMERICAN),
        ("en-us", VoiceLanguage.AMERICAN),
        ("EN_GB", VoiceLanguage.BRITISH),
        ("british", VoiceLanguage.BRITISH),
        ("am_michael", VoiceLanguage.AMERICAN),
        ("BF_EMMA", VoiceLanguage.BRITISH),
        (" bm_george ", VoiceLanguage.BRITISH),
        (VoiceLanguage.BRITISH, VoiceLanguage.BRITISH),
    ],
)
def test_selectors_resolve_to_dialects(selector, expected) -> None:
    assert resolve_language(selector) is expected


def test_none_means_default() -> None:
    assert resolve_language(None) is DEFAULT_LANGUAGE
    assert DEFAULT_LANGUAGE is VoiceLanguage.AMERICAN


@pytest.mark.parametrize("selector", ["", "   ", "zf_xiaobei", "jf_alpha"])
def test_unknown_selectors_fall_back_with_warning(selector, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="phonetext.languages"):
        assert resolve_language(selector) is VoiceLanguage.AMERICAN
    assert any("Unknown dialect selector" in record.getMessage() for record in caplog.records)


def test_backend_codes() -> None:
    assert dialect_code("a") == "en-us"
    assert dialect_code("bf_isabella") == "en-gb"


def test_only_american_profile_carries_extra_rules() -> None:
    american = get_dialect_profile(VoiceLanguage.AMERICAN)
    british = get_dialect_profile(VoiceLanguage.BRITISH)
    assert [rule.name for rule in american.phoneme_rules] == ["ninety_flap"]
    assert british.phoneme_rules == ()


def test_profile_as_dict() -> None:
    assert DIALECT_PROFILES[VoiceLanguage.BRITISH].as_dict() == {
        "code": "b",
        "backend_code": "en-gb",
        "description": "British English",
        "phoneme_rules": [],
    }


def test_voice_language_is_a_string() -> None:
    assert VoiceLanguage.AMERICAN == "a"
    assert VoiceLanguage("b") is VoiceLanguage.BRITISH
