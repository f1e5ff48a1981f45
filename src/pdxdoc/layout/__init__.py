#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pdxdoc/layout/__init__.py
"""Layout engine and the draw primitives it produces."""

from pdxdoc.layout.engine import LayoutEngine, LayoutResult, layout
from pdxdoc.layout.measure import HeuristicMeasurer, TextMeasurer
from pdxdoc.layout.primitives import (
    Break,
    DrawPrimitive,
    ImageBlock,
    ListMarker,
    Point,
    Rule,
    Size,
    TextBlock,
    TextLine,
    VisualRun,
)

__all__ = [
    "LayoutEngine",
    "LayoutResult",
    "layout",
    "TextMeasurer",
    "HeuristicMeasurer",
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
]
