#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for parsing, layout and export.

Every options class is a frozen dataclass; use ``create_updated`` to derive a
modified copy.
"""

from __future__ import annotations

from pdxdoc.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from pdxdoc.options.html import HtmlRendererOptions
from pdxdoc.options.layout import LayoutOptions
from pdxdoc.options.markup import MarkupParserOptions
from pdxdoc.options.pdf import PdfRendererOptions
from pdxdoc.options.png import PngRendererOptions

__all__ = [
    "CloneFrozenMixin",
    "BaseParserOptions",
    "BaseRendererOptions",
    "MarkupParserOptions",
    "LayoutOptions",
    "HtmlRendererOptions",
    "PdfRendererOptions",
    "PngRendererOptions",
]
