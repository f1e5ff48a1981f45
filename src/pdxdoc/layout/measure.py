#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/layout/measure.py
"""Text measurement used for line wrapping.

The default :class:`HeuristicMeasurer` estimates advance widths from
character classes, so layout is deterministic without any font files. The
PDF backend passes a font-metric measurer instead so that wrapping matches
the embedded fonts exactly.

"""

from __future__ import annotations

import unicodedata
from typing import Protocol

from pdxdoc.ast.nodes import Direction

_NARROW = frozenset("il.,;:'|!`()[]{}/\\\"")
_WIDE_LATIN = frozenset("mwMW@%")


class TextMeasurer(Protocol):
    """Width provider consulted by the layout engine."""

    def measure(
        self,
        text: str,
        font_size: float,
        *,
        bold: bool = False,
        italic: bool = False,
        monospace: bool = False,
        direction: Direction = Direction.LTR,
    ) -> float:
        """Return the advance width of ``text`` in layout units."""
        ...


def _char_factor(ch: str) -> float:
    if unicodedata.combining(ch):
        return 0.0
    if ch == " ":
        return 0.28
    if ch == "\t":
        return 1.12
    if ch in _NARROW:
        return 0.3
    if ch in _WIDE_LATIN:
        return 0.85
    if ch.isdigit():
        return 0.56
    if ch.isupper():
        return 0.68
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 1.0
    category = unicodedata.category(ch)
    if category.startswith("C"):
        return 0.0
    if category.startswith("P") or category.startswith("S"):
        return 0.45
    return 0.52


class HeuristicMeasurer:
    """Deterministic width estimate from character classes.

    Examples
    --------
        >>> m = HeuristicMeasurer()
        >>> m.measure("iii", 10) < m.measure("MMM", 10)
        True

    """

    mono_factor = 0.6
    bold_factor = 1.06

    def measure(
        self,
        text: str,
        font_size: float,
        *,
        bold: bool = False,
        italic: bool = False,
        monospace: bool = False,
        direction: Direction = Direction.LTR,
    ) -> float:
        if monospace:
            return sum(0.0 if unicodedata.combining(ch) else self.mono_factor for ch in text) * font_size
        width = sum(_char_factor(ch) for ch in text) * font_size
        return width * self.bold_factor if bold else width


__all__ = ["TextMeasurer", "HeuristicMeasurer"]
