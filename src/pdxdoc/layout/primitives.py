#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/layout/primitives.py
"""Backend-agnostic draw primitives produced by the layout engine.

Coordinates are in layout units with the origin at the top-left of the
content area; ``y`` grows downwards and, when paginating, keeps growing
across pages (page ``n`` spans ``[n * page_height, (n + 1) * page_height)``).
All primitives are immutable so two layout passes can be compared for
equality.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pdxdoc.ast.nodes import Direction, Emphasis, TextRun
from pdxdoc.constants import PrimitiveRole
from pdxdoc.styles import StyleRule


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class VisualRun:
    """A run fragment placed on a line.

    Parameters
    ----------
    text : str
        Logical text of the fragment (glyph shaping is done by backends)
    x : float
        Left edge relative to the block
    width : float
        Measured advance width
    direction : Direction
        Resolved direction of the fragment
    emphasis : Emphasis
    language_hint : str or None
    run_index : int
        Index of the source run in the block (or list item)

    """

    text: str
    x: float
    width: float
    direction: Direction
    emphasis: Emphasis
    language_hint: Optional[str]
    run_index: int


@dataclass(frozen=True)
class TextLine:
    """One wrapped line; ``runs`` are in left-to-right visual order."""

    runs: tuple[VisualRun, ...]
    y: float
    height: float
    baseline: float
    width: float


@dataclass(frozen=True)
class ListMarker:
    """Bullet or number drawn beside a list item, in visual form."""

    text: str
    x: float
    width: float


@dataclass(frozen=True)
class TextBlock:
    """A laid-out text block (heading, paragraph, list item or code).

    ``position`` is the top-left corner of the block; line ``y`` values and
    run ``x`` values are relative to it. A block split across a page boundary
    becomes two TextBlocks with ``continued=True`` on the second.

    """

    role: PrimitiveRole
    lines: tuple[TextLine, ...]
    position: Point
    size: Size
    style: StyleRule
    base_direction: Direction
    node_path: tuple[int, ...]
    source_runs: tuple[TextRun, ...] = ()
    level: int = 0
    list_group: int = -1
    item_index: int = -1
    ordered: bool = False
    marker: Optional[ListMarker] = None
    language: Optional[str] = None
    continued: bool = False

    @property
    def visual_runs(self) -> tuple[VisualRun, ...]:
        return tuple(run for line in self.lines for run in line.runs)


@dataclass(frozen=True)
class ImageBlock:
    """Image (or its placeholder) placed in the flow."""

    resource_key: str
    position: Point
    size: Size
    alt_text: str
    placeholder: bool
    node_path: tuple[int, ...]


@dataclass(frozen=True)
class Rule:
    """Horizontal rule from ``position`` spanning ``width``."""

    position: Point
    width: float
    color: str
    node_path: tuple[int, ...]


@dataclass(frozen=True)
class Break:
    """Page boundary.

    ``forced`` is True for explicit PageBreak nodes (and dividers when
    configured); height-triggered breaks have ``forced=False``. In continuous
    layout, PageBreak nodes still emit a forced Break with ``page_index`` -1
    so backends can mark the spot.

    """

    position: Point
    forced: bool
    page_index: int
    node_path: tuple[int, ...] = ()


DrawPrimitive = Union[TextBlock, ImageBlock, Rule, Break]


def primitive_bottom(primitive: DrawPrimitive) -> float:
    """Bottom edge of a primitive in layout units."""
    if isinstance(primitive, (TextBlock, ImageBlock)):
        return primitive.position.y + primitive.size.height
    return primitive.position.y


__all__ = [
    "Point",
    "Size",
    "VisualRun",
    "TextLine",
    "ListMarker",
    "TextBlock",
    "ImageBlock",
    "Rule",
    "Break",
    "DrawPrimitive",
    "primitive_bottom",
]
