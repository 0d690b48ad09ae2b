from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterator, List

from phonetext.constants import PUNCTUATION


@dataclass(frozen=True)
class Segment:
    is_punctuation: bool
    text: str

    def as_dict(self) -> Dict[str, object]:
        return {"is_punctuation": self.is_punctuation, "text": self.text}


@lru_cache(maxsize=8)
def punctuation_pattern(punctuation: str = PUNCTUATION) -> "re.Pattern[str]":
    """Compile the punctuation-run pattern for a set of characters.

    A run is whitespace-padded punctuation, possibly repeated, so
    ``" ... "`` or ``", «"`` each come out as a single segment.
    """

    if not punctuation:
        raise ValueError("Punctuation set must not be empty")
    char_class = "[" + re.escape(punctuation) + "]+"
    return re.compile(rf"\s*{char_class}(?:\s*{char_class})*\s*")


def iter_segments(text: str, punctuation: str = PUNCTUATION) -> Iterator[Segment]:
    if not text:
        return
    if not punctuation:
        yield Segment(False, text)
        return

    pattern = punctuation_pattern(punctuation)
    position = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if end == start:
            continue
        if position < start:
            yield Segment(False, text[position:start])
        yield Segment(True, match.group(0))
        position = end
    if position < len(text):
        yield Segment(False, text[position:])


def split_segments(text: str, punctuation: str = PUNCTUATION) -> List[Segment]:
    """Split text into ordered punctuation and content segments.

    Joining the texts of the returned segments gives back ``text`` exactly.
    """

    return list(iter_segments(text, punctuation))


def join_segments(segments: List[Segment]) -> str:
    return "".join(segment.text for segment in segments)
