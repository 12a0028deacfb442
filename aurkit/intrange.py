"""Parsing of number-menu selections such as ``1 2 3``, ``1-3`` or ``^4``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")
_SEPARATORS = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class IntRange:
    """A closed range of integers."""

    low: int
    high: int

    def contains(self, n: int) -> bool:
        """Return whether ``n`` lies within the range, bounds included."""
        return self.low <= n <= self.high

    def __contains__(self, n: int) -> bool:
        return self.contains(n)


class IntRanges(list):
    """A list of :class:`IntRange` values."""

    def contains(self, n: int) -> bool:
        """Return whether ``n`` lies within any of the ranges."""
        return any(r.contains(n) for r in self)

    def __contains__(self, n: object) -> bool:
        if isinstance(n, int):
            return self.contains(n)
        return super().__contains__(n)


@dataclass
class NumberMenuSelection:
    """The parsed parts of a number-menu answer."""

    include: IntRanges = field(default_factory=IntRanges)
    exclude: IntRanges = field(default_factory=IntRanges)
    other_include: set[str] = field(default_factory=set)
    other_exclude: set[str] = field(default_factory=set)


def _parse_int(text: str) -> int | None:
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def parse_number_menu(text: str) -> NumberMenuSelection:
    """Parse a menu answer split by whitespace or commas.

    Numbers and ``a-b`` ranges are included, and excluded when prefixed by
    ``^``. Words that are not numbers are collected lower-cased so that the
    caller can interpret answers such as ``all`` or ``none``.
    """
    selection = NumberMenuSelection()

    for word in (w for w in _SEPARATORS.split(text) if w):
        ranges, others = selection.include, selection.other_include
        if word.startswith("^"):
            ranges, others = selection.exclude, selection.other_exclude
            word = word[1:]

        parts = word.split("-", 1)
        first = _parse_int(parts[0])
        if first is None:
            others.add(word.lower())
            continue

        if len(parts) == 2:
            second = _parse_int(parts[1])
            if second is None:
                others.add(word.lower())
                continue
        else:
            second = first

        ranges.append(IntRange(min(first, second), max(first, second)))

    return selection