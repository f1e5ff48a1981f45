#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/utils/__init__.py
"""Utility modules for the pdxdoc package.

This package contains dependency checks, I/O helpers, font discovery, glyph
shaping and HTML helpers shared by the export backends.
"""

from pdxdoc.utils.fonts import FontProvider, FontSource
from pdxdoc.utils.html_utils import escape_html
from pdxdoc.utils.io_utils import read_text, write_content
from pdxdoc.utils.shaping import display_text

__all__ = [
    "FontProvider",
    "FontSource",
    "display_text",
    "escape_html",
    "read_text",
    "write_content",
]
