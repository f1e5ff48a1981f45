"""pdxdoc - bilingual (Arabic/English) structured documents with HTML, PDF and PNG export.

A document is a tree of block nodes (headings, paragraphs, lists, code,
images, dividers and page breaks) whose text lives in direction-tagged runs.
The tree is written as a small line-oriented markup, stored in a JSON
container together with metadata and a style sheet, and exported through a
layout engine that handles right-to-left text and mixed-direction lines.

Key Features
------------
- Markup parser that never fails: malformed lines degrade to text
- Serializer that round-trips parsed trees
- Per-run direction inference and visual reordering of mixed lines
- Layout engine with zoom, word wrap and pagination
- HTML export with ``dir`` attributes and inline styles
- PDF export with embedded TrueType fonts (reportlab)
- PNG export on an RGBA canvas (Pillow)

Examples
--------
Parse markup and export it:

    >>> from pdxdoc import from_markup, export_html
    >>> doc = from_markup("# Hello\\n\\nمرحبا بالعالم")
    >>> html = export_html(doc)

Load a container and write a PDF:

    >>> from pdxdoc import load_document, export_pdf
    >>> export_pdf(load_document("report.pdx"), "report.pdf")

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# The document model is imported first: the bidi resolver depends on the node
# types, and the document aggregate depends on the bidi resolver.
from pdxdoc.ast import (
    CodeBlock,
    Direction,
    Divider,
    Document,
    Emphasis,
    Heading,
    Image,
    List,
    Metadata,
    Node,
    PageBreak,
    Paragraph,
    Sequence,
    TextRun,
)
from pdxdoc.api import export, export_html, export_pdf, export_png, from_markup, open_document
from pdxdoc.ast.container import dumps, load_document, loads, save_document
from pdxdoc.exceptions import (
    DependencyError,
    DocumentFormatError,
    ExportEncodingError,
    ExportError,
    ExportIOError,
    PdxError,
    UnresolvedResourceError,
    UnsupportedImageError,
    ValidationError,
)
from pdxdoc.layout import LayoutEngine, LayoutResult, layout
from pdxdoc.parsers.markup import MarkupParser, parse
from pdxdoc.renderers.markup import serialize
from pdxdoc.resources import Resources
from pdxdoc.sample import create_sample_document
from pdxdoc.styles import StyleRule, StyleSheet

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Document model
    "Document",
    "Metadata",
    "Node",
    "Sequence",
    "Heading",
    "Paragraph",
    "List",
    "CodeBlock",
    "Image",
    "Divider",
    "PageBreak",
    "TextRun",
    "Direction",
    "Emphasis",
    "StyleRule",
    "StyleSheet",
    "Resources",
    # Markup and container
    "parse",
    "serialize",
    "MarkupParser",
    "dumps",
    "loads",
    "load_document",
    "save_document",
    "create_sample_document",
    # Layout and export
    "layout",
    "LayoutEngine",
    "LayoutResult",
    "export",
    "export_html",
    "export_pdf",
    "export_png",
    "from_markup",
    "open_document",
    # Exceptions
    "PdxError",
    "ValidationError",
    "DocumentFormatError",
    "UnresolvedResourceError",
    "ExportError",
    "ExportIOError",
    "ExportEncodingError",
    "UnsupportedImageError",
    "DependencyError",
]
