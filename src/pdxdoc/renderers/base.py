#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/renderers/base.py
"""Base class for document renderers (markup serializer and export backends).

Renderers only read the document: nothing in a render call may mutate the
node tree, metadata, style sheet or resource table.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import IO, Union

from pdxdoc.ast.document import Document
from pdxdoc.exceptions import ExportIOError, InvalidOptionsError
from pdxdoc.options.base import BaseRendererOptions
from pdxdoc.resources import image_paths
from pdxdoc.utils.io_utils import describe_target, write_content

logger = logging.getLogger(__name__)


class BaseRenderer(ABC):
    """Abstract base class for all renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
        >>> class WordCountRenderer(BaseRenderer):
        ...     format_name = "words"
        ...     def render(self, doc, output):
        ...         self.write_text_output(self.render_to_string(doc), output)
        ...     def render_to_string(self, doc):
        ...         return str(len(serialize(doc).split()))

    """

    format_name = "base"

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the document to a file path or file-like object.

        Parameters
        ----------
        doc : Document
            Document to render
        output : str, Path, or IO
            Output destination

        Raises
        ------
        ExportError
            If rendering fails
        ExportIOError
            If the output cannot be written

        """

    def render_to_string(self, doc: Document) -> str:
        """Render the document to a string (text formats only)."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support rendering to a string.")

    def render_to_bytes(self, doc: Document) -> bytes:
        """Render the document to bytes through an in-memory buffer."""
        buffer = BytesIO()
        self.render(doc, buffer)
        return buffer.getvalue()

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    def write_output(self, content: Union[str, bytes], output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write rendered content, converting OS errors to :class:`ExportIOError`."""
        try:
            write_content(content, output)
        except OSError as e:
            raise ExportIOError(describe_target(output), backend=self.format_name, original_error=e) from e

    def write_text_output(self, text: str, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Write text output to a file or stream (binary streams receive UTF-8)."""
        self.write_output(text, output)

    def resolve_images(self, doc: Document) -> None:
        """Decode every image the document references into its resource table.

        Failed images are logged and later drawn as placeholders, unless
        ``fail_on_resource_errors`` is set.

        Raises
        ------
        UnresolvedResourceError
            If an image cannot be resolved and ``fail_on_resource_errors`` is True

        """
        paths = image_paths(doc.content)
        if not paths:
            return
        doc.resources.preload(paths)
        for path in dict.fromkeys(paths):
            failure = doc.resources.failure(path)
            if failure is None:
                continue
            if self.options is not None and self.options.fail_on_resource_errors:
                raise failure
            logger.warning("%s; drawing a placeholder", failure.message)
