#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pdxdoc/renderers/__init__.py
"""Renderers for converting a document to its output formats.

Available renderers:
- MarkupRenderer: Serialize the node tree to markup text (always available)
- HtmlRenderer: Render to HTML (always available)
- PdfRenderer: Render to PDF (requires reportlab, arabic-reshaper, python-bidi)
- PngRenderer: Rasterize to PNG (requires Pillow, arabic-reshaper, python-bidi)

Third-party packages are imported when a render starts, so every renderer can
be imported without them; a missing package raises
:class:`~pdxdoc.exceptions.DependencyError` at render time.

Examples
--------
    >>> from pdxdoc.renderers import HtmlRenderer
    >>> from pdxdoc.options import HtmlRendererOptions
    >>> html = HtmlRenderer(HtmlRendererOptions(standalone=False)).render_to_string(doc)

"""

from pdxdoc.renderers.base import BaseRenderer
from pdxdoc.renderers.html import HtmlRenderer
from pdxdoc.renderers.markup import MarkupRenderer, serialize
from pdxdoc.renderers.pdf import PdfRenderer
from pdxdoc.renderers.png import PngRenderer

__all__ = [
    "BaseRenderer",
    "MarkupRenderer",
    "HtmlRenderer",
    "PdfRenderer",
    "PngRenderer",
    "serialize",
]
