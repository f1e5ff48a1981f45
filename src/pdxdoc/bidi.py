#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/bidi.py
"""Direction inference and paragraph-level visual ordering of text runs.

The functions here are pure: the same runs and hints always produce the same
result, so the layout engine and every export backend can call them freely.

Paragraph model
---------------
A paragraph's base direction is the direction of its first strongly
directional run. Maximal sequences of runs whose direction is opposite to the
base are reversed in presentation order, and for a right-to-left base the
whole line is then mirrored. The characters inside each run keep their own
order; glyph-level reordering within a run is the job of
:func:`pdxdoc.utils.shaping.display_text`.

"""

from __future__ import annotations

import unicodedata
from typing import Iterable, Literal, Optional, Sequence

from pdxdoc.ast.nodes import PLAIN, Direction, Emphasis, TextRun

_STRONG_LTR = frozenset({"L"})
_STRONG_RTL = frozenset({"R", "AL"})

_ARABIC_RANGES = ((0x0600, 0x06FF), (0x0750, 0x077F), (0x08A0, 0x08FF), (0xFB50, 0xFDFF), (0xFE70, 0xFEFF))
_HEBREW_RANGES = ((0x0590, 0x05FF), (0xFB1D, 0xFB4F))


def _in_ranges(ch: str, ranges: tuple[tuple[int, int], ...]) -> bool:
    cp = ord(ch)
    return any(lo <= cp <= hi for lo, hi in ranges)


def char_direction(ch: str) -> Optional[Direction]:
    """Return the strong direction of a character, or None for neutrals."""
    bidi_class = unicodedata.bidirectional(ch)
    if bidi_class in _STRONG_LTR:
        return Direction.LTR
    if bidi_class in _STRONG_RTL:
        return Direction.RTL
    return None


def is_rtl_char(ch: str) -> bool:
    return unicodedata.bidirectional(ch) in _STRONG_RTL


def is_latin_char(ch: str) -> bool:
    return ch.isalpha() and unicodedata.name(ch, "").startswith("LATIN")


def is_arabic_char(ch: str) -> bool:
    return _in_ranges(ch, _ARABIC_RANGES)


def has_strong_char(text: str) -> bool:
    return any(char_direction(ch) is not None for ch in text)


def infer_direction(text: str) -> Direction:
    """Infer the direction of a run from its text.

    A run is right-to-left when it contains no Latin-script letter and at
    least one character from a right-to-left script; otherwise it is
    left-to-right.

    Examples
    --------
        >>> infer_direction("مرحبا")
        <Direction.RTL: 'rtl'>
        >>> infer_direction("PDX محرر")
        <Direction.LTR: 'ltr'>
        >>> infer_direction("123")
        <Direction.LTR: 'ltr'>

    """
    has_rtl = False
    for ch in text:
        if is_latin_char(ch):
            return Direction.LTR
        if not has_rtl and is_rtl_char(ch):
            has_rtl = True
    return Direction.RTL if has_rtl else Direction.LTR


def infer_language(text: str) -> Optional[str]:
    """Return a language hint for right-to-left script text, else None."""
    for ch in text:
        if _in_ranges(ch, _ARABIC_RANGES):
            return "ar"
        if _in_ranges(ch, _HEBREW_RANGES):
            return "he"
    return None


def split_directional(text: str) -> list[str]:
    """Split text at every change of strong direction.

    Neutral characters stay with the preceding piece; leading neutrals join
    the first strong piece. Concatenating the result gives back ``text``.
    """
    pieces: list[str] = []
    current: list[str] = []
    current_dir: Optional[Direction] = None
    for ch in text:
        d = char_direction(ch)
        if d is not None and current_dir is not None and d is not current_dir:
            pieces.append("".join(current))
            current = []
        if d is not None:
            current_dir = d
        current.append(ch)
    if current:
        pieces.append("".join(current))
    return pieces


def make_runs(text: str, emphasis: Emphasis = PLAIN) -> list[TextRun]:
    """Build direction-tagged runs for ``text``, one per directional piece."""
    return [
        TextRun(piece, infer_direction(piece), infer_language(piece), emphasis) for piece in split_directional(text)
    ]


def resolve_direction(run: TextRun) -> Direction:
    """Return the run's concrete direction, resolving ``AUTO`` from its text."""
    if run.direction is Direction.AUTO:
        return infer_direction(run.text)
    return run.direction


def base_direction(runs: Iterable[TextRun], default: Direction = Direction.LTR) -> Direction:
    """Return the direction of the first strongly directional run."""
    for run in runs:
        if has_strong_char(run.text):
            return resolve_direction(run)
    return default


def effective_directions(runs: Sequence[TextRun], base: Direction) -> list[Direction]:
    """Resolve every run, giving neutral runs the direction of their context.

    A run with no strong character takes the direction shared by the nearest
    strong runs on both sides, or the base direction when they differ.
    """
    strong: list[Optional[Direction]] = [resolve_direction(r) if has_strong_char(r.text) else None for r in runs]
    result: list[Direction] = []
    for i, direction in enumerate(strong):
        if direction is not None:
            result.append(direction)
            continue
        before = next((d for d in reversed(strong[:i]) if d is not None), base)
        after = next((d for d in strong[i + 1 :] if d is not None), base)
        result.append(before if before is after else base)
    return result


def visual_order(runs: Sequence[TextRun], base: Optional[Direction] = None) -> list[int]:
    """Return run indices in left-to-right visual order.

    Parameters
    ----------
    runs : sequence of TextRun
        Runs of one line in logical order
    base : Direction, optional
        Paragraph base direction; computed from ``runs`` when omitted

    Returns
    -------
    list of int
        Indices into ``runs``, leftmost first

    Examples
    --------
    A right-to-left paragraph with a trailing Latin run draws the Latin run
    to the left of the Arabic one:

        >>> runs = [TextRun("مرحبا ", Direction.RTL), TextRun("PDX", Direction.LTR)]
        >>> visual_order(runs)
        [1, 0]

    """
    if base is None or base is Direction.AUTO:
        base = base_direction(runs)
    directions = effective_directions(runs, base)

    order: list[int] = []
    i = 0
    while i < len(runs):
        if directions[i] is base:
            order.append(i)
            i += 1
            continue
        j = i
        while j < len(runs) and directions[j] is not base:
            j += 1
        order.extend(reversed(range(i, j)))
        i = j

    if base is Direction.RTL:
        order.reverse()
    return order


def marker_edge(base: Direction) -> Literal["left", "right"]:
    """Edge of the block where list markers are drawn."""
    return "right" if base is Direction.RTL else "left"


def list_marker(ordered: bool, index: int, base: Direction) -> str:
    """Return the visual marker string for list item ``index`` (0-based)."""
    if not ordered:
        return "•"
    return f".{index + 1}" if base is Direction.RTL else f"{index + 1}."


__all__ = [
    "char_direction",
    "is_rtl_char",
    "is_latin_char",
    "is_arabic_char",
    "has_strong_char",
    "infer_direction",
    "infer_language",
    "split_directional",
    "make_runs",
    "resolve_direction",
    "base_direction",
    "effective_directions",
    "visual_order",
    "marker_edge",
    "list_marker",
]
