from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union

from phonetext.number_expansion import expand_currency, expand_decimal, expand_number

logger = logging.getLogger(__name__)

Replacement = Union[str, Callable[["re.Match[str]"], str]]


@dataclass(frozen=True)
class RewriteRule:
    """One ordered step of the normalizer: a regex and what replaces each match."""

    name: str
    pattern: str
    replacement: Replacement
    flags: int = 0
    _compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.pattern, self.flags))

    @property
    def regex(self) -> "re.Pattern[str]":
        return self._compiled

    def apply(self, text: str) -> str:
        return self._compiled.sub(self.replacement, text)


def _hyphenate_dotted_letters(match: re.Match[str]) -> str:
    return match.group(0).replace(".", "-")


_QUOTE_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("single_quotes", r"[‘’]", "'"),
    RewriteRule("open_guillemet", r"«", "“"),
    RewriteRule("close_guillemet", r"»", "”"),
    RewriteRule("double_quotes", r"[“”]", '"'),
    # Must follow the guillemet rules or the new guillemets would be swapped back.
    RewriteRule("open_paren", r"\(", "«"),
    RewriteRule("close_paren", r"\)", "»"),
)

_CJK_PUNCTUATION_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("ideographic_comma", r"、", ", "),
    RewriteRule("ideographic_full_stop", r"。", ". "),
    RewriteRule("fullwidth_exclamation", r"！", "! "),
    RewriteRule("fullwidth_comma", r"，", ", "),
    RewriteRule("fullwidth_colon", r"：", ": "),
    RewriteRule("fullwidth_semicolon", r"；", "; "),
    RewriteRule("fullwidth_question", r"？", "? "),
)

_WHITESPACE_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("whitespace_to_space", r"[^\S \n]", " "),
    RewriteRule("collapse_spaces", r"  +", " "),
    RewriteRule("blank_lines", r"(?<=\n) +(?=\n)", ""),
)

_ABBREVIATION_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("doctor", r"\bD[Rr]\.(?= [A-Z])", "Doctor", re.ASCII),
    RewriteRule("mister", r"\b(?:Mr\.|MR\.(?= [A-Z]))", "Mister", re.ASCII),
    RewriteRule("miss", r"\b(?:Ms\.|MS\.(?= [A-Z]))", "Miss", re.ASCII),
    RewriteRule("missus", r"\b(?:Mrs\.|MRS\.(?= [A-Z]))", "Mrs", re.ASCII),
    RewriteRule("etcetera", r"\betc\.(?! [A-Z])", "etc", re.IGNORECASE | re.ASCII),
)

_CASUAL_WORD_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("yeah", r"\b(y)eah?\b", r"\1e'a", re.IGNORECASE | re.ASCII),
)

# Digits and word boundaries are ASCII only; other scripts' numerals pass through.
_NUMBER_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule(
        "times_and_years",
        r"\d*\.\d+|\b\d{4}s?\b|(?<!:)\b(?:[1-9]|1[0-2]):[0-5]\d\b(?!:)",
        expand_number,
        re.ASCII,
    ),
    RewriteRule("thousands_separators", r"(?<=\d),(?=\d)", "", re.ASCII),
    RewriteRule(
        "currency",
        r"[$£]\d+(?:\.\d+)?(?: hundred| thousand| (?:[bm]|tr)illion)*\b|[$£]\d+\.\d\d?\b",
        expand_currency,
        re.IGNORECASE | re.ASCII,
    ),
    RewriteRule("decimals", r"\d*\.\d+", expand_decimal, re.ASCII),
    RewriteRule("numeric_ranges", r"(?<=\d)-(?=\d)", " to ", re.ASCII),
    RewriteRule("digit_capital_s", r"(?<=\d)S", " S", re.ASCII),
)

_POSSESSIVE_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("consonant_possessive", r"(?<=[BCDFGHJ-NP-TV-Z])'?s\b", "'S", re.ASCII),
    RewriteRule("x_possessive", r"(?<=X')S\b", "s", re.ASCII),
)

_ACRONYM_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("dotted_initialisms", r"(?:[A-Za-z]\.){2,} [a-z]", _hyphenate_dotted_letters, re.ASCII),
    RewriteRule("letter_dot_letter", r"(?<=[A-Z])\.(?=[A-Z])", "-", re.IGNORECASE | re.ASCII),
)

NORMALIZATION_RULES: Tuple[RewriteRule, ...] = (
    _QUOTE_RULES
    + _CJK_PUNCTUATION_RULES
    + _WHITESPACE_RULES
    + _ABBREVIATION_RULES
    + _CASUAL_WORD_RULES
    + _NUMBER_RULES
    + _POSSESSIVE_RULES
    + _ACRONYM_RULES
)

RULE_GROUPS = {
    "quotes": _QUOTE_RULES,
    "cjk_punctuation": _CJK_PUNCTUATION_RULES,
    "whitespace": _WHITESPACE_RULES,
    "abbreviations": _ABBREVIATION_RULES,
    "casual_words": _CASUAL_WORD_RULES,
    "numbers": _NUMBER_RULES,
    "possessives": _POSSESSIVE_RULES,
    "acronyms": _ACRONYM_RULES,
}


def get_rule(name: str) -> RewriteRule:
    for rule in NORMALIZATION_RULES:
        if rule.name == name:
            return rule
    raise KeyError(name)


def apply_rules(text: str, rules: Iterable[RewriteRule]) -> str:
    for rule in rules:
        text = rule.apply(text)
    return text


def normalize_text(text: str, *, rules: Optional[Sequence[RewriteRule]] = None) -> str:
    """Rewrite raw text into a form the phonemizer reads aloud correctly.

    Rules run in a fixed order and later rules see the output of earlier
    ones, so reordering ``NORMALIZATION_RULES`` changes results.
    """

    if not text:
        return ""
    normalized = apply_rules(text, NORMALIZATION_RULES if rules is None else rules)
    normalized = normalized.strip()
    logger.debug("Normalized %d chars into %d chars", len(text), len(normalized))
    return normalized
