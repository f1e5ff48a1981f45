#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for PDF export."""

from dataclasses import dataclass, field

from pdxdoc.constants import DEFAULT_PAGE_SIZE, DEFAULT_PDF_MARGIN, PAGE_SIZES, PageSize
from pdxdoc.options.base import BaseRendererOptions


# src/pdxdoc/options/pdf.py
@dataclass(frozen=True)
class PdfRendererOptions(BaseRendererOptions):
    """Options for rendering a document to PDF.

    Parameters
    ----------
    page_size : {"a4", "letter", "legal"}, default "a4"
        Page size for the PDF document.
    margin_top, margin_bottom, margin_left, margin_right : float, default 56.69
        Margins in points (20mm).
    font_dirs : tuple of str, default ()
        Extra directories searched for TrueType fonts before the built-in
        search path.
    include_page_numbers : bool, default False
        Draw "n / total" page numbers in the bottom margin.
    divider_breaks_page : bool, default False
        Treat dividers as forced page boundaries.
    zoom : float, default 1.0
        Layout zoom factor.
    subject : str, default ""
        PDF subject metadata.

    """

    page_size: PageSize = field(
        default=DEFAULT_PAGE_SIZE,
        metadata={"help": "Page size: a4, letter, or legal", "choices": list(PAGE_SIZES), "importance": "core"},
    )
    margin_top: float = field(
        default=DEFAULT_PDF_MARGIN,
        metadata={"help": "Top margin in points (72pt = 1 inch)", "type": float, "importance": "advanced"},
    )
    margin_bottom: float = field(
        default=DEFAULT_PDF_MARGIN,
        metadata={"help": "Bottom margin in points", "type": float, "importance": "advanced"},
    )
    margin_left: float = field(
        default=DEFAULT_PDF_MARGIN, metadata={"help": "Left margin in points", "type": float, "importance": "advanced"}
    )
    margin_right: float = field(
        default=DEFAULT_PDF_MARGIN, metadata={"help": "Right margin in points", "type": float, "importance": "advanced"}
    )
    font_dirs: tuple[str, ...] = field(
        default=(),
        metadata={"help": "Additional TrueType font directories", "importance": "advanced"},
    )
    include_page_numbers: bool = field(
        default=False,
        metadata={"help": "Add page numbers to footer", "importance": "core"},
    )
    divider_breaks_page: bool = field(
        default=False,
        metadata={"help": "Start a new page at every divider", "importance": "advanced"},
    )
    zoom: float = field(
        default=1.0,
        metadata={"help": "Zoom factor for font sizes and spacing", "type": float, "importance": "advanced"},
    )
    subject: str = field(default="", metadata={"help": "PDF subject metadata", "importance": "advanced"})

    def __post_init__(self) -> None:
        """Validate numeric ranges for PDF renderer options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.page_size not in PAGE_SIZES:
            raise ValueError(f"page_size must be one of {sorted(PAGE_SIZES)}, got {self.page_size!r}")
        for name in ("margin_top", "margin_bottom", "margin_left", "margin_right"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")

        width, height = PAGE_SIZES[self.page_size]
        if self.margin_left + self.margin_right >= width:
            raise ValueError("horizontal margins leave no room for content")
        if self.margin_top + self.margin_bottom >= height:
            raise ValueError("vertical margins leave no room for content")

    @property
    def page_dimensions(self) -> tuple[float, float]:
        return PAGE_SIZES[self.page_size]

    @property
    def content_width(self) -> float:
        return self.page_dimensions[0] - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.page_dimensions[1] - self.margin_top - self.margin_bottom
