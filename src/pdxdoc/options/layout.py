#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the layout engine."""

from dataclasses import dataclass, field
from typing import Optional

from pdxdoc.constants import (
    DEFAULT_BLOCK_GAP,
    DEFAULT_LIST_INDENT,
    DEFAULT_MARKER_GAP,
    DEFAULT_PAGE_WIDTH,
    DEFAULT_PLACEHOLDER_HEIGHT,
    DEFAULT_PLACEHOLDER_WIDTH,
)
from pdxdoc.options.base import CloneFrozenMixin


# src/pdxdoc/options/layout.py
@dataclass(frozen=True)
class LayoutOptions(CloneFrozenMixin):
    """Geometry used by the layout engine.

    Parameters
    ----------
    page_width : float
        Width available to content, in layout units
    page_height : float or None, default None
        Content height per page. None lays out one continuous surface.
    placeholder_width, placeholder_height : float
        Size of the box reserved for an unresolved image (before zoom)
    list_indent : float
        Indent of list item text from the marker edge (before zoom)
    marker_gap : float
        Gap between a list marker and its text (before zoom)
    block_gap : float
        Extra vertical gap added after every block (before zoom)
    divider_breaks_page : bool, default False
        Treat Divider nodes as forced page boundaries when paginating

    """

    page_width: float = field(
        default=DEFAULT_PAGE_WIDTH,
        metadata={"help": "Content width in layout units", "type": float, "importance": "core"},
    )
    page_height: Optional[float] = field(
        default=None,
        metadata={"help": "Content height per page; unset for continuous layout", "importance": "core"},
    )
    placeholder_width: float = field(
        default=DEFAULT_PLACEHOLDER_WIDTH,
        metadata={"help": "Width of unresolved image placeholders", "type": float, "importance": "advanced"},
    )
    placeholder_height: float = field(
        default=DEFAULT_PLACEHOLDER_HEIGHT,
        metadata={"help": "Height of unresolved image placeholders", "type": float, "importance": "advanced"},
    )
    list_indent: float = field(
        default=DEFAULT_LIST_INDENT,
        metadata={"help": "List item indent", "type": float, "importance": "advanced"},
    )
    marker_gap: float = field(
        default=DEFAULT_MARKER_GAP,
        metadata={"help": "Gap between list marker and item text", "type": float, "importance": "advanced"},
    )
    block_gap: float = field(
        default=DEFAULT_BLOCK_GAP,
        metadata={"help": "Extra space after every block", "type": float, "importance": "advanced"},
    )
    divider_breaks_page: bool = field(
        default=False,
        metadata={"help": "Start a new page at every divider when paginating", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate geometry.

        Raises
        ------
        ValueError
            If any dimension is non-positive or negative where not allowed.

        """
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive, got {self.page_width}")
        if self.page_height is not None and self.page_height <= 0:
            raise ValueError(f"page_height must be positive, got {self.page_height}")
        if self.placeholder_width <= 0 or self.placeholder_height <= 0:
            raise ValueError("placeholder dimensions must be positive")
        if self.list_indent < 0 or self.marker_gap < 0 or self.block_gap < 0:
            raise ValueError("list_indent, marker_gap and block_gap must be non-negative")
        if self.list_indent >= self.page_width:
            raise ValueError("list_indent must be smaller than page_width")
