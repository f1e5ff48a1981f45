#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for HTML export."""

from dataclasses import dataclass, field
from typing import Optional

from pdxdoc.constants import DEFAULT_HTML_CONTENT_WIDTH, DEFAULT_HTML_FONT_FAMILY
from pdxdoc.options.base import BaseRendererOptions


# src/pdxdoc/options/html.py
@dataclass(frozen=True)
class HtmlRendererOptions(BaseRendererOptions):
    """Options for rendering a document to HTML.

    Parameters
    ----------
    standalone : bool, default True
        Emit a complete ``<!DOCTYPE html>`` document. When False only the
        body fragment is produced.
    include_default_css : bool, default True
        Add the base ``<style>`` block (font stack, content width, code and
        rule styling) to standalone output
    language : str or None, default None
        ``lang`` attribute of the root element; defaults to the document's
        metadata language
    content_width : float, default 800.0
        Width in CSS pixels that text is laid out against and the ``max-width``
        of the body
    font_family : str
        CSS font stack for body text
    zoom : float, default 1.0
        Layout zoom factor applied to font sizes and spacing

    """

    standalone: bool = field(
        default=True,
        metadata={"help": "Produce a full HTML document rather than a fragment", "importance": "core"},
    )
    include_default_css: bool = field(
        default=True,
        metadata={"help": "Include the base style block", "importance": "core"},
    )
    language: Optional[str] = field(
        default=None,
        metadata={"help": "Root lang attribute (defaults to document language)", "importance": "advanced"},
    )
    content_width: float = field(
        default=DEFAULT_HTML_CONTENT_WIDTH,
        metadata={"help": "Content width in CSS pixels", "type": float, "importance": "advanced"},
    )
    font_family: str = field(
        default=DEFAULT_HTML_FONT_FAMILY,
        metadata={"help": "CSS font-family for body text", "importance": "advanced"},
    )
    zoom: float = field(
        default=1.0,
        metadata={"help": "Zoom factor for font sizes and spacing", "type": float, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        if self.content_width <= 0:
            raise ValueError(f"content_width must be positive, got {self.content_width}")
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")
