# sitescan/patterns.py
"""
Target patterns.

A raw pattern wrapped in slashes ("/works?/") is a regular expression; anything
else is a literal substring ("example.com"). Both kinds compile to a
case-insensitive re.Pattern, so occurrence search is the same code either way.

Public API:
    compile_patterns(raw_patterns) -> list[Pattern]
    Pattern.occurrences(text)      -> iterator of (offset, matched_text)
    Pattern.search(text)           -> bool
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from .errors import PatternCompileError


class PatternKind(enum.Enum):
    LITERAL = "literal"
    REGEX = "regex"


@dataclass(frozen=True)
class Pattern:
    kind: PatternKind
    raw: str
    regex: re.Pattern

    def occurrences(self, text: str) -> Iterator[Tuple[int, str]]:
        """Every non-overlapping match, left to right. Empty matches are skipped."""
        for m in self.regex.finditer(text):
            if m.end() > m.start():
                yield m.start(), m.group(0)

    def search(self, text: str) -> bool:
        return self.regex.search(text) is not None


def is_regex_source(raw: str) -> bool:
    """True for "/.../" with at least one character between the slashes."""
    return len(raw) > 2 and raw.startswith("/") and raw.endswith("/")


def compile_pattern(raw: str) -> Pattern:
    if is_regex_source(raw):
        try:
            return Pattern(PatternKind.REGEX, raw, re.compile(raw[1:-1], re.IGNORECASE))
        except re.error as exc:
            raise PatternCompileError(raw, str(exc)) from exc
    return Pattern(PatternKind.LITERAL, raw, re.compile(re.escape(raw), re.IGNORECASE))


def compile_patterns(raw_patterns: Iterable[str]) -> List[Pattern]:
    """Compile in the given order. The first malformed regex aborts with PatternCompileError."""
    return [compile_pattern(raw) for raw in raw_patterns]
