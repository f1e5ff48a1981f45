"""The main exported API functions for loading and exporting documents."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/pdxdoc/api.py
import logging
from pathlib import Path
from typing import IO, Optional, Union

from pdxdoc.ast.container import dumps, load_document
from pdxdoc.ast.document import Document, Metadata
from pdxdoc.ast.nodes import Heading, plain_text
from pdxdoc.constants import DEFAULT_TITLE, ExportFormat
from pdxdoc.exceptions import DocumentFormatError, ExportIOError, ValidationError
from pdxdoc.options.base import BaseRendererOptions
from pdxdoc.options.markup import MarkupParserOptions
from pdxdoc.parsers.markup import MarkupParser
from pdxdoc.renderers.base import BaseRenderer
from pdxdoc.renderers.html import HtmlRenderer
from pdxdoc.renderers.markup import MarkupRenderer
from pdxdoc.renderers.pdf import PdfRenderer
from pdxdoc.renderers.png import PngRenderer
from pdxdoc.resources import Resources
from pdxdoc.utils.io_utils import describe_target, read_text, write_content

logger = logging.getLogger(__name__)

OutputTarget = Union[str, Path, IO[bytes], IO[str], None]

CONTAINER_SUFFIXES = (".pdx", ".json")

_RENDERERS: dict[str, type[BaseRenderer]] = {
    "html": HtmlRenderer,
    "pdf": PdfRenderer,
    "png": PngRenderer,
    "markup": MarkupRenderer,
}
_BINARY_FORMATS = ("pdf", "png")


def from_markup(
    text: str,
    metadata: Optional[Metadata] = None,
    options: Optional[MarkupParserOptions] = None,
    resources: Optional[Resources] = None,
) -> Document:
    """Build a document from markup text.

    When no metadata is given, the title is taken from the first heading.

    Examples
    --------
        >>> doc = from_markup("# Report\\n\\nBody")
        >>> doc.title
        'Report'

    """
    content = MarkupParser(options).parse(text)
    if metadata is None:
        first_heading = next((node for node in content.blocks() if isinstance(node, Heading)), None)
        title = plain_text(first_heading.runs).strip() if first_heading is not None else ""
        metadata = Metadata(title=title or DEFAULT_TITLE)
    return Document(metadata=metadata, content=content, resources=resources if resources is not None else Resources())


def open_document(path: Union[str, Path], options: Optional[MarkupParserOptions] = None) -> Document:
    """Open a document container (``.pdx``/``.json``) or a markup text file.

    Image paths resolve relative to the file's directory.

    Raises
    ------
    DocumentFormatError
        If the file cannot be read or is not a valid container

    """
    file_path = Path(path)
    if file_path.suffix.lower() in CONTAINER_SUFFIXES:
        return load_document(file_path)
    try:
        text = read_text(file_path)
    except OSError as e:
        raise DocumentFormatError(f"Cannot read markup: {e}", file_path=str(file_path), original_error=e) from e
    doc = from_markup(text, options=options, resources=Resources(base_dir=file_path.parent))
    logger.info("Parsed %s (%d blocks)", file_path, doc.content.block_count())
    return doc


def get_renderer(target_format: str, options: Optional[BaseRendererOptions] = None) -> BaseRenderer:
    """Return a renderer instance for ``target_format``.

    Raises
    ------
    ValidationError
        If the format has no renderer

    """
    renderer_class = _RENDERERS.get(target_format)
    if renderer_class is None:
        raise ValidationError(
            f"Unknown export format {target_format!r}; expected one of {sorted(_RENDERERS)}",
            parameter_name="target_format",
            parameter_value=target_format,
        )
    return renderer_class(options)  # type: ignore[call-arg]


def export(
    doc: Document,
    target_format: ExportFormat,
    output: OutputTarget = None,
    options: Optional[BaseRendererOptions] = None,
) -> Union[None, str, bytes]:
    """Export a document to ``target_format``.

    Parameters
    ----------
    doc : Document
        Document to export; it is never modified
    target_format : {"html", "pdf", "png", "markup", "json"}
        Output format
    output : str, Path, IO[bytes], IO[str], or None, optional
        Destination. If None, the content is returned.
    options : BaseRendererOptions, optional
        Options for the format's renderer

    Returns
    -------
    None, str, or bytes
        - None if output was specified (content written to output)
        - str for text formats when output is None
        - bytes for pdf and png when output is None

    """
    if target_format == "json":
        content: Union[str, bytes] = dumps(doc) + "\n"
    else:
        renderer = get_renderer(target_format, options)
        if target_format in _BINARY_FORMATS:
            content = renderer.render_to_bytes(doc)
        else:
            content = renderer.render_to_string(doc)

    if output is None:
        return content
    try:
        write_content(content, output)
    except OSError as e:
        raise ExportIOError(describe_target(output), backend=target_format, original_error=e) from e
    return None


def export_html(doc: Document, output: OutputTarget = None, options=None) -> Optional[str]:
    """Export a document to HTML; returns the HTML text when ``output`` is None."""
    return export(doc, "html", output, options)  # type: ignore[return-value]


def export_pdf(doc: Document, output: OutputTarget = None, options=None) -> Optional[bytes]:
    """Export a document to PDF; returns the PDF bytes when ``output`` is None."""
    return export(doc, "pdf", output, options)  # type: ignore[return-value]


def export_png(doc: Document, output: OutputTarget = None, options=None) -> Optional[bytes]:
    """Export a document to PNG; returns the PNG bytes when ``output`` is None."""
    return export(doc, "png", output, options)  # type: ignore[return-value]


__all__ = [
    "from_markup",
    "open_document",
    "get_renderer",
    "export",
    "export_html",
    "export_pdf",
    "export_png",
]
