#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/renderers/pdf.py
"""PDF export using the ReportLab canvas.

TrueType fonts found by :class:`~pdxdoc.utils.fonts.FontProvider` are
registered with ReportLab, which embeds the used subset of each one in the
file. The layout engine runs paginated against the page's content box with a
measurer backed by the same font metrics, so the wrapped lines match what is
drawn.

Right-to-left runs are reshaped and reordered for display, then drawn
anchored at their right edge. Before anything is drawn every run is checked
against the font it will be drawn with; a character with no glyph raises
:class:`~pdxdoc.exceptions.ExportEncodingError`.

"""

from __future__ import annotations

import logging
import unicodedata
from io import BytesIO
from pathlib import Path
from typing import IO, Any, Optional, Union

from pdxdoc.ast.document import Document
from pdxdoc.ast.nodes import Direction
from pdxdoc.constants import (
    CODE_BACKGROUND,
    DEFAULT_CODE_PADDING,
    DEFAULT_CREATOR,
    DEFAULT_PDF_PAGE_NUMBER_SIZE,
    DEPS_PDF_RENDER,
    PLACEHOLDER_FILL,
    PLACEHOLDER_STROKE,
)
from pdxdoc.exceptions import ExportEncodingError, ExportError, UnsupportedImageError
from pdxdoc.layout.engine import LayoutEngine, LayoutResult
from pdxdoc.layout.primitives import ImageBlock, Rule, TextBlock, VisualRun
from pdxdoc.options.layout import LayoutOptions
from pdxdoc.options.pdf import PdfRendererOptions
from pdxdoc.renderers.base import BaseRenderer
from pdxdoc.utils.decorators import debug_timer, requires_dependencies
from pdxdoc.utils.fonts import FontProvider, FontSource, font_role
from pdxdoc.utils.shaping import display_text

logger = logging.getLogger(__name__)

_ALT_TEXT_SIZE = 9.0


def _needs_glyph(ch: str) -> bool:
    return not ch.isspace() and unicodedata.category(ch) not in ("Cc", "Cf")


class PdfFontSet:
    """Fonts used for one PDF export, keyed by role.

    Bold, italic and monospace roles fall back to the regular font when no
    dedicated file was found; right-to-left text uses the ``rtl`` font when
    available.

    """

    def __init__(self, sources: dict[str, Optional[FontSource]]):
        regular = sources.get("regular")
        if regular is None:
            raise ExportError("No TrueType font available for PDF export", backend="pdf")
        self.regular = regular
        self.bold = sources.get("bold") or regular
        self.italic = sources.get("italic") or regular
        self.bold_italic = sources.get("bold_italic") or self.bold
        self.mono = sources.get("mono") or regular
        self.rtl = sources.get("rtl")

    @classmethod
    def from_provider(cls, provider: FontProvider) -> "PdfFontSet":
        return cls({role: provider.load(role) for role in ("regular", "bold", "italic", "bold_italic", "mono", "rtl")})

    def select(
        self,
        direction: Direction,
        bold: bool = False,
        italic: bool = False,
        monospace: bool = False,
        text: str = "",
    ) -> FontSource:
        """Pick the font a run is drawn with."""
        role = font_role(direction, bold=bold, italic=italic, monospace=monospace, text=text)
        if role == "rtl" and self.rtl is None:
            role = font_role(Direction.LTR, bold=bold, italic=italic)
        return getattr(self, role)

    @property
    def sources(self) -> list[FontSource]:
        unique: dict[str, FontSource] = {}
        for source in (self.regular, self.bold, self.italic, self.bold_italic, self.mono, self.rtl):
            if source is not None:
                unique.setdefault(source.name, source)
        return list(unique.values())

    @property
    def names(self) -> list[str]:
        return [source.name for source in self.sources]

    def register(self) -> None:
        """Register every font with ReportLab (once per process)."""
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfbase.ttfonts import TTFError, TTFont

        registered = set(pdfmetrics.getRegisteredFontNames())
        for source in self.sources:
            if source.name in registered:
                continue
            font_file: Any = str(source.path) if source.path is not None else source.stream()
            try:
                pdfmetrics.registerFont(TTFont(source.name, font_file))
            except TTFError as e:
                raise ExportError(f"Cannot embed font {source.name}: {e}", backend="pdf", original_error=e) from e
            logger.debug("Registered PDF font %s", source.name)


class FontMetricMeasurer:
    """Measure text with the advance widths of the fonts being embedded."""

    def __init__(self, fonts: PdfFontSet):
        self.fonts = fonts

    def measure(
        self,
        text: str,
        font_size: float,
        *,
        bold: bool = False,
        italic: bool = False,
        monospace: bool = False,
        direction: Direction = Direction.LTR,
    ) -> float:
        from reportlab.pdfbase.pdfmetrics import stringWidth

        font = self.fonts.select(direction, bold, italic, monospace, text)
        if direction is Direction.RTL:
            text = display_text(text, direction)
        return stringWidth(text, font.name, font_size)


class PdfRenderer(BaseRenderer):
    """Render a document to PDF.

    Parameters
    ----------
    options : PdfRendererOptions or None, default = None
        PDF page and font options
    font_provider : FontProvider, optional
        Font lookup; built from ``options.font_dirs`` when omitted

    Examples
    --------
        >>> renderer = PdfRenderer(PdfRendererOptions(page_size="letter"))
        >>> renderer.render(doc, "output.pdf")

    """

    format_name = "pdf"

    def __init__(self, options: PdfRendererOptions | None = None, font_provider: FontProvider | None = None):
        BaseRenderer._validate_options_type(options, PdfRendererOptions, "pdf")
        options = options or PdfRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: PdfRendererOptions = options
        self.font_provider = font_provider or FontProvider(options.font_dirs)

    def layout_options(self) -> LayoutOptions:
        return LayoutOptions(
            page_width=self.options.content_width,
            page_height=self.options.content_height,
            divider_breaks_page=self.options.divider_breaks_page,
        )

    def layout(self, doc: Document, fonts: PdfFontSet) -> LayoutResult:
        engine = LayoutEngine(
            doc.stylesheet,
            zoom=self.options.zoom,
            options=self.layout_options(),
            resources=doc.resources,
            measurer=FontMetricMeasurer(fonts),
        )
        return engine.run(doc.content)

    @requires_dependencies("pdf", DEPS_PDF_RENDER)
    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the document to PDF and write it to ``output``.

        Raises
        ------
        ExportEncodingError
            If a character has no glyph in the embedded fonts
        UnresolvedResourceError
            If an image is missing and ``fail_on_resource_errors`` is True
        ExportIOError
            If the output cannot be written

        """
        with debug_timer(logger, "PDF export"):
            fonts = PdfFontSet.from_provider(self.font_provider)
            fonts.register()
            self.resolve_images(doc)
            result = self.layout(doc, fonts)
            self.check_glyphs(result, fonts)
            pdf_bytes = self._draw(doc, result, fonts)
        logger.info("Rendered %d page(s) of PDF", result.page_count)
        self.write_output(pdf_bytes, output)

    def check_glyphs(self, result: LayoutResult, fonts: PdfFontSet) -> None:
        """Verify every run can be drawn with the font selected for it.

        Raises
        ------
        ExportEncodingError
            Naming the first missing code point and the run that holds it

        """
        for primitive in result.primitives:
            if not isinstance(primitive, TextBlock):
                continue
            for run in primitive.visual_runs:
                font = self._run_font(primitive, run, fonts)
                candidates = run.text
                if run.direction is Direction.RTL:
                    candidates += display_text(run.text, run.direction)
                for ch in candidates:
                    if _needs_glyph(ch) and not font.covers(ch):
                        raise ExportEncodingError(
                            ord(ch), primitive.node_path, run.run_index, backend="pdf", font_names=fonts.names
                        )

    @staticmethod
    def _run_font(block: TextBlock, run: VisualRun, fonts: PdfFontSet) -> FontSource:
        return fonts.select(
            run.direction,
            bold=block.style.bold or run.emphasis.bold,
            italic=run.emphasis.italic,
            monospace=block.style.monospace,
            text=run.text,
        )

    # ----------------------------------------------------------------- drawing

    def _draw(self, doc: Document, result: LayoutResult, fonts: PdfFontSet) -> bytes:
        from reportlab.pdfgen import canvas

        buffer = BytesIO()
        page_width, page_height = self.options.page_dimensions
        pdf = canvas.Canvas(buffer, pagesize=(page_width, page_height), pageCompression=1)
        pdf.setTitle(doc.metadata.title)
        pdf.setAuthor(doc.metadata.author)
        pdf.setSubject(self.options.subject)
        pdf.setKeywords(", ".join(doc.metadata.keywords))
        pdf.setCreator(self.options.creator or DEFAULT_CREATOR)

        pages = result.pages()
        for page_index, primitives in enumerate(pages):
            if page_index:
                pdf.showPage()
            offset = page_index * (result.page_height or 0.0)
            for primitive in primitives:
                if isinstance(primitive, TextBlock):
                    self._draw_text_block(pdf, primitive, offset, fonts)
                elif isinstance(primitive, ImageBlock):
                    self._draw_image(pdf, doc, primitive, offset, fonts)
                elif isinstance(primitive, Rule):
                    self._draw_rule(pdf, primitive, offset)
            if self.options.include_page_numbers:
                self._draw_page_number(pdf, page_index + 1, len(pages), fonts)

        pdf.save()
        return buffer.getvalue()

    def _x(self, x: float) -> float:
        return self.options.margin_left + x

    def _y(self, y: float, offset: float) -> float:
        """Convert a layout y (top-down) to a PDF y (bottom-up) on the current page."""
        page_height = self.options.page_dimensions[1]
        return page_height - self.options.margin_top - (y - offset)

    def _draw_text_block(self, pdf: Any, block: TextBlock, offset: float, fonts: PdfFontSet) -> None:
        from reportlab.lib.colors import HexColor

        style = block.style
        if block.role == "code":
            padding = DEFAULT_CODE_PADDING * self.options.zoom
            pdf.setFillColor(HexColor(CODE_BACKGROUND))
            pdf.rect(
                self._x(-padding),
                self._y(block.position.y + block.size.height + padding, offset),
                block.size.width + 2 * padding,
                block.size.height + 2 * padding,
                stroke=0,
                fill=1,
            )

        pdf.setFillColor(HexColor(style.color))
        for line_number, line in enumerate(block.lines):
            baseline = self._y(block.position.y + line.y + line.baseline, offset)
            if line_number == 0 and block.marker is not None:
                marker_font = fonts.select(Direction.LTR, bold=style.bold)
                pdf.setFont(marker_font.name, style.font_size)
                pdf.drawString(self._x(block.marker.x), baseline, block.marker.text)
            for run in line.runs:
                font = self._run_font(block, run, fonts)
                pdf.setFont(font.name, style.font_size)
                if run.direction is Direction.RTL:
                    pdf.drawRightString(self._x(run.x + run.width), baseline, display_text(run.text, run.direction))
                else:
                    pdf.drawString(self._x(run.x), baseline, run.text.replace("\t", "    "))

    def _draw_image(self, pdf: Any, doc: Document, block: ImageBlock, offset: float, fonts: PdfFontSet) -> None:
        from reportlab.lib.utils import ImageReader

        x = self._x(block.position.x)
        y = self._y(block.position.y + block.size.height, offset)
        decoded = doc.resources.get(block.resource_key)
        if decoded is not None and decoded.image is not None and not block.placeholder:
            try:
                pdf.drawImage(ImageReader(decoded.image), x, y, block.size.width, block.size.height, mask="auto")
                return
            except (OSError, ValueError) as e:
                if self.options.fail_on_resource_errors:
                    raise UnsupportedImageError(block.resource_key, backend="pdf", original_error=e) from e
                logger.warning("Cannot embed image %s (%s); drawing a placeholder", block.resource_key, e)
        self._draw_placeholder(pdf, block, x, y, fonts)

    def _draw_placeholder(self, pdf: Any, block: ImageBlock, x: float, y: float, fonts: PdfFontSet) -> None:
        from reportlab.lib.colors import HexColor

        pdf.setFillColor(HexColor(PLACEHOLDER_FILL))
        pdf.setStrokeColor(HexColor(PLACEHOLDER_STROKE))
        pdf.rect(x, y, block.size.width, block.size.height, stroke=1, fill=1)
        label = block.alt_text or block.resource_key
        font = fonts.select(Direction.AUTO, text=label)
        if label and all(font.covers(ch) for ch in label if _needs_glyph(ch)):
            pdf.setFillColor(HexColor(PLACEHOLDER_STROKE))
            pdf.setFont(font.name, _ALT_TEXT_SIZE)
            pdf.drawCentredString(
                x + block.size.width / 2, y + block.size.height / 2, display_text(label, Direction.AUTO)
            )

    def _draw_rule(self, pdf: Any, rule: Rule, offset: float) -> None:
        from reportlab.lib.colors import HexColor

        y = self._y(rule.position.y, offset)
        pdf.setStrokeColor(HexColor(rule.color))
        pdf.setLineWidth(0.75)
        pdf.line(self._x(rule.position.x), y, self._x(rule.position.x + rule.width), y)

    def _draw_page_number(self, pdf: Any, number: int, total: int, fonts: PdfFontSet) -> None:
        from reportlab.lib.colors import HexColor

        pdf.setFillColor(HexColor("#666666"))
        pdf.setFont(fonts.regular.name, DEFAULT_PDF_PAGE_NUMBER_SIZE)
        x = self.options.page_dimensions[0] / 2
        pdf.drawCentredString(x, self.options.margin_bottom / 2, f"{number} / {total}")


__all__ = ["PdfRenderer", "PdfFontSet", "FontMetricMeasurer"]
