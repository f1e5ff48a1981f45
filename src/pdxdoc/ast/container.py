#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/ast/container.py
"""Document container: JSON record holding metadata, styles and markup body.

The body is stored as markup text, produced by the serializer and read back
by the parser; metadata and the style sheet pass through as plain JSON.
Resources are never written.

Format
------
    {
      "version": 1,
      "metadata": {"title": ..., "author": ..., "language": ..., "created": ...,
                   "modified": ..., "keywords": [...]},
      "stylesheet": {"styles": {"heading1": {...}, ...}, "active_theme": "default"},
      "body": "# Title\\n\\nText"
    }

The minimal legacy form ``{"version", "meta": {"title", "lang"}, "content"}``
is also accepted on load.

Examples
--------
    >>> from pdxdoc.ast.container import dumps, loads
    >>> doc = loads('{"version": 1, "body": "# Hello"}')
    >>> doc.content.children[0].level
    1
    >>> loads(dumps(doc)) == doc
    True

"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

from pdxdoc.ast.document import Document, Metadata
from pdxdoc.constants import PDX_FORMAT_VERSION
from pdxdoc.exceptions import DocumentFormatError, ExportIOError
from pdxdoc.parsers.markup import MarkupParser
from pdxdoc.renderers.markup import serialize
from pdxdoc.resources import Resources
from pdxdoc.styles import StyleSheet

logger = logging.getLogger(__name__)


def document_to_dict(doc: Document) -> dict[str, Any]:
    """Convert a document to its container record."""
    return {
        "version": doc.version,
        "metadata": doc.metadata.to_dict(),
        "stylesheet": doc.stylesheet.to_dict(),
        "body": serialize(doc.content),
    }


def document_from_dict(data: Mapping[str, Any], resources: Resources | None = None) -> Document:
    """Build a document from a container record.

    Parameters
    ----------
    data : mapping
        Decoded JSON record
    resources : Resources, optional
        Resource table to attach (a fresh one by default)

    Raises
    ------
    DocumentFormatError
        If required fields are missing or have the wrong type

    """
    if not isinstance(data, Mapping):
        raise DocumentFormatError(f"Document container must be a JSON object, got {type(data).__name__}")

    version = data.get("version", PDX_FORMAT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool):
        raise DocumentFormatError(f"Invalid container version: {version!r}")
    if version > PDX_FORMAT_VERSION:
        logger.warning("Container version %d is newer than supported version %d", version, PDX_FORMAT_VERSION)

    body = data.get("body", data.get("content", ""))
    if not isinstance(body, str):
        raise DocumentFormatError("'body' must be a string of markup text")

    raw_meta = data.get("metadata", data.get("meta", {})) or {}
    raw_styles = data.get("stylesheet", {}) or {}
    try:
        metadata = Metadata.from_dict(dict(raw_meta))
        stylesheet = StyleSheet.from_dict(raw_styles) if raw_styles else StyleSheet.default()
    except (TypeError, ValueError) as e:
        raise DocumentFormatError(f"Invalid document container: {e}", original_error=e) from e

    parser = MarkupParser()
    content = parser.parse(body)
    for degradation in parser.degradations:
        logger.debug("Body line %d degraded: %s", degradation.line_number, degradation.message)

    return Document(
        metadata=metadata,
        stylesheet=stylesheet,
        content=content,
        version=version,
        resources=resources if resources is not None else Resources(),
    )


def dumps(doc: Document, indent: int | None = 2) -> str:
    """Serialize a document container to a JSON string."""
    return json.dumps(document_to_dict(doc), indent=indent, ensure_ascii=False)


def loads(text: Union[str, bytes], resources: Resources | None = None) -> Document:
    """Deserialize a document container from a JSON string.

    Raises
    ------
    DocumentFormatError
        If the text is not valid JSON or not a valid container

    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Invalid JSON: {e.msg} at line {e.lineno}", original_error=e) from e
    return document_from_dict(data, resources=resources)


def load_document(path: Union[str, Path]) -> Document:
    """Load a container file; image paths resolve relative to its directory.

    Raises
    ------
    DocumentFormatError
        If the file cannot be read or decoded

    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentFormatError(f"Cannot read document: {e}", file_path=str(file_path), original_error=e) from e
    try:
        doc = loads(text, resources=Resources(base_dir=file_path.parent))
    except DocumentFormatError as e:
        raise DocumentFormatError(e.message, file_path=str(file_path), original_error=e.original_error) from e
    logger.info("Loaded %s (%d blocks)", file_path, doc.content.block_count())
    return doc


def save_document(doc: Document, path: Union[str, Path]) -> None:
    """Write a document container to ``path``.

    Raises
    ------
    ExportIOError
        If the file cannot be written

    """
    file_path = Path(path)
    try:
        file_path.write_text(dumps(doc) + "\n", encoding="utf-8")
    except OSError as e:
        raise ExportIOError(str(file_path), backend="pdx", original_error=e) from e
    logger.info("Saved %s", file_path)


__all__ = ["document_to_dict", "document_from_dict", "dumps", "loads", "load_document", "save_document"]
