from __future__ import annotations

import re
from typing import Union

MatchOrText = Union[str, "re.Match[str]"]

_CURRENCY_UNITS = {
    "$": ("dollar", "cent", "cents"),
    "£": ("pound", "penny", "pence"),
}


def _as_text(value: MatchOrText) -> str:
    if isinstance(value, str):
        return value
    return value.group(0)


def _ascii_digits_only(value: str) -> bool:
    return not any(char.isdigit() and not char.isascii() for char in value)


def _is_numeric(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return value.strip() != ""


def expand_number(value: MatchOrText) -> str:
    """Spell out a clock time or a four digit year.

    Decimals are returned untouched so the decimal rule can handle them later.
    """

    text = _as_text(value)
    if "." in text or not _ascii_digits_only(text):
        return text

    if ":" in text:
        hour_raw, _, minute_raw = text.partition(":")
        try:
            hour = int(hour_raw)
            minute = int(minute_raw)
        except ValueError:
            return text
        if minute == 0:
            return f"{hour} o'clock"
        if minute < 10:
            return f"{hour} oh {minute}"
        return f"{hour} {minute}"

    try:
        year = int(text[:4])
        remainder = int(text[2:4])
    except ValueError:
        return text
    if year < 1100 or year % 1000 < 10:
        return text

    prefix = text[:2]
    suffix = "s" if text.endswith("s") else ""
    if 100 <= year % 1000 <= 999:
        if remainder == 0:
            return f"{prefix} hundred{suffix}"
        if remainder < 10:
            return f"{prefix} oh {remainder}{suffix}"
    return f"{prefix} {remainder}{suffix}"


def expand_currency(value: MatchOrText) -> str:
    text = _as_text(value)
    units = _CURRENCY_UNITS.get(text[:1])
    if units is None or len(text) < 2 or not _ascii_digits_only(text):
        return text

    unit, minor_single, minor_plural = units
    amount = text[1:]
    if not _is_numeric(amount):
        # "$5 million" and friends: the remainder carries a magnitude word.
        return f"{amount} {unit}s"
    if "." not in amount:
        suffix = "" if amount == "1" else "s"
        return f"{amount} {unit}{suffix}"

    whole, _, fraction = amount.partition(".")
    try:
        minor = int(fraction.ljust(2, "0")[:2])
    except ValueError:
        return text
    whole_suffix = "" if whole == "1" else "s"
    minor_unit = minor_single if minor == 1 else minor_plural
    return f"{whole} {unit}{whole_suffix} and {minor} {minor_unit}"


def expand_decimal(value: MatchOrText) -> str:
    text = _as_text(value)
    whole, separator, fraction = text.partition(".")
    if not separator or not fraction or not _ascii_digits_only(text):
        return text
    return f"{whole} point {' '.join(fraction)}"
