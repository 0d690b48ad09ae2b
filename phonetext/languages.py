from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from phonetext.postprocessing import AMERICAN_PHONEME_RULES
from phonetext.text_normalization import RewriteRule

logger = logging.getLogger(__name__)


class VoiceLanguage(str, Enum):
    AMERICAN = "a"
    BRITISH = "b"


DEFAULT_LANGUAGE = VoiceLanguage.AMERICAN

LanguageLike = Union[VoiceLanguage, str, None]


@dataclass(frozen=True)
class DialectProfile:
    language: VoiceLanguage
    backend_code: str
    description: str
    phoneme_rules: Tuple[RewriteRule, ...] = ()

    def as_dict(self) -> Dict[str, object]:
        return {
            "code": self.language.value,
            "backend_code": self.backend_code,
            "description": self.description,
            "phoneme_rules": [rule.name for rule in self.phoneme_rules],
        }


DIALECT_PROFILES: Dict[VoiceLanguage, DialectProfile] = {
    VoiceLanguage.AMERICAN: DialectProfile(
        language=VoiceLanguage.AMERICAN,
        backend_code="en-us",
        description="American English",
        phoneme_rules=AMERICAN_PHONEME_RULES,
    ),
    VoiceLanguage.BRITISH: DialectProfile(
        language=VoiceLanguage.BRITISH,
        backend_code="en-gb",
        description="British English",
    ),
}

# Older settings may store ISO-like values instead of the one-letter code.
LANGUAGE_ALIASES: Dict[str, VoiceLanguage] = {
    "en": VoiceLanguage.AMERICAN,
    "en-us": VoiceLanguage.AMERICAN,
    "en_us": VoiceLanguage.AMERICAN,
    "american": VoiceLanguage.AMERICAN,
    "en-gb": VoiceLanguage.BRITISH,
    "en_gb": VoiceLanguage.BRITISH,
    "british": VoiceLanguage.BRITISH,
}

_CODE_LOOKUP: Dict[str, VoiceLanguage] = {language.value: language for language in VoiceLanguage}


def _lookup(value: str) -> Optional[VoiceLanguage]:
    lowered = value.strip().lower()
    if not lowered:
        return None
    alias = LANGUAGE_ALIASES.get(lowered)
    if alias is not None:
        return alias
    # Only the leading dialect letter of a voice name matters.
    return _CODE_LOOKUP.get(lowered[0])


def resolve_language(value: LanguageLike) -> VoiceLanguage:
    """Map a language code, alias or voice name (``am_michael``) to a dialect.

    Unknown selectors fall back to ``DEFAULT_LANGUAGE`` with a warning.
    """

    if isinstance(value, VoiceLanguage):
        return value
    if value is None:
        return DEFAULT_LANGUAGE
    resolved = _lookup(str(value))
    if resolved is None:
        logger.warning(
            "Unknown dialect selector %r; falling back to %s",
            value,
            DIALECT_PROFILES[DEFAULT_LANGUAGE].description,
        )
        return DEFAULT_LANGUAGE
    return resolved


def get_dialect_profile(value: LanguageLike) -> DialectProfile:
    return DIALECT_PROFILES[resolve_language(value)]


def dialect_code(value: LanguageLike) -> str:
    return get_dialect_profile(value).backend_code
