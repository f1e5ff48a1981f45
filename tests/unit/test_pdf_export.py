#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_pdf_export.py
"""Unit tests for PdfRenderer.

Note: These tests require reportlab to be installed. Documents containing
Arabic text also need a font with Arabic coverage on the font search path
(DejaVu Sans or Noto Sans Arabic); those tests are skipped otherwise.

"""

import copy
import math
from io import BytesIO

import pytest
from utils import PYPDF_AVAILABLE, REPORTLAB_AVAILABLE, SHAPING_AVAILABLE, make_document, rtl_font_available

from pdxdoc.ast.nodes import Direction, Image, PageBreak, Paragraph, Sequence, TextRun
from pdxdoc.exceptions import ExportEncodingError, ExportError, InvalidOptionsError, UnresolvedResourceError
from pdxdoc.options import HtmlRendererOptions, PdfRendererOptions
from pdxdoc.parsers.markup import parse
from pdxdoc.utils.fonts import FontProvider

if REPORTLAB_AVAILABLE:
    from pdxdoc.renderers.pdf import FontMetricMeasurer, PdfFontSet, PdfRenderer

pytestmark = [
    pytest.mark.pdf,
    pytest.mark.skipif(not (REPORTLAB_AVAILABLE and SHAPING_AVAILABLE), reason="reportlab or shaping libs missing"),
]

needs_rtl_font = pytest.mark.skipif(
    not (REPORTLAB_AVAILABLE and rtl_font_available()), reason="no font with Arabic coverage found"
)


def read_pdf(data):
    """Open PDF bytes with pypdf, skipping when it is not installed."""
    if not PYPDF_AVAILABLE:
        pytest.skip("pypdf not installed")
    from pypdf import PdfReader

    return PdfReader(BytesIO(data))


@pytest.mark.unit
class TestPdfBasics:
    """Tests for basic PDF output."""

    def test_produces_pdf(self):
        data = PdfRenderer().render_to_bytes(make_document(parse("# Hello\n\nWorld")))
        assert data.startswith(b"%PDF-")

    def test_page_break_gives_two_pages(self):
        doc = make_document(Sequence([Paragraph([TextRun("one")]), PageBreak(), Paragraph([TextRun("two")])]))
        reader = read_pdf(PdfRenderer().render_to_bytes(doc))
        assert len(reader.pages) == 2

    def test_long_document_paginates(self):
        doc = make_document(parse("\n\n".join(["paragraph text " * 20] * 40)))
        reader = read_pdf(PdfRenderer().render_to_bytes(doc))
        assert len(reader.pages) > 1

    @pytest.mark.parametrize("count", [5, 40, 120])
    def test_page_count_is_ceil_of_layout_height(self, count):
        doc = make_document(parse("\n\n".join(["paragraph text " * 20] * count)))
        renderer = PdfRenderer()
        fonts = PdfFontSet.from_provider(renderer.font_provider)
        fonts.register()
        result = renderer.layout(doc, fonts)
        reader = read_pdf(renderer.render_to_bytes(doc))
        assert len(reader.pages) == result.page_count == math.ceil(result.total_height / result.page_height)

    def test_page_break_after_overflow_adds_one_page(self):
        body = "\n\n".join(["paragraph text " * 20] * 40)
        renderer = PdfRenderer()
        fonts = PdfFontSet.from_provider(renderer.font_provider)
        fonts.register()
        alone = renderer.layout(make_document(parse(body)), fonts)
        reader = read_pdf(renderer.render_to_bytes(make_document(parse(body + "\n\n===\n\ntail"))))
        assert alone.page_count > 1
        assert len(reader.pages) == math.ceil(alone.total_height / alone.page_height) + 1

    def test_page_size(self):
        renderer = PdfRenderer(PdfRendererOptions(page_size="letter"))
        reader = read_pdf(renderer.render_to_bytes(make_document(parse("x"))))
        box = reader.pages[0].mediabox
        assert (float(box.width), float(box.height)) == (612.0, 792.0)

    def test_metadata(self):
        doc = make_document(parse("x"), title="Quarterly Report")
        doc.metadata.author = "Finance"
        reader = read_pdf(PdfRenderer().render_to_bytes(doc))
        assert reader.metadata.title == "Quarterly Report"
        assert reader.metadata.author == "Finance"

    def test_text_is_extractable(self):
        reader = read_pdf(PdfRenderer().render_to_bytes(make_document(parse("Searchable words"))))
        assert "Searchable" in reader.pages[0].extract_text()

    def test_page_numbers(self):
        doc = make_document(Sequence([Paragraph([TextRun("a")]), PageBreak(), Paragraph([TextRun("b")])]))
        options = PdfRendererOptions(include_page_numbers=True)
        reader = read_pdf(PdfRenderer(options).render_to_bytes(doc))
        assert "2 / 2" in reader.pages[1].extract_text()

    def test_render_to_path(self, tmp_path):
        out = tmp_path / "out.pdf"
        PdfRenderer().render(make_document(parse("x")), out)
        assert out.read_bytes().startswith(b"%PDF-")

    def test_invalid_options(self):
        with pytest.raises(InvalidOptionsError):
            PdfRenderer(HtmlRendererOptions())

    def test_options_validation(self):
        with pytest.raises(ValueError):
            PdfRendererOptions(page_size="a0")
        with pytest.raises(ValueError):
            PdfRendererOptions(zoom=0)


@pytest.mark.unit
class TestPdfGlyphCoverage:
    """Tests for missing glyph detection."""

    def test_missing_glyph_raises(self):
        doc = make_document(Sequence([Paragraph([TextRun("ok")]), Paragraph([TextRun("bad \ue000", Direction.LTR)])]))
        with pytest.raises(ExportEncodingError) as exc_info:
            PdfRenderer().render_to_bytes(doc)
        error = exc_info.value
        assert error.code_point == 0xE000
        assert error.node_path == (1,)
        assert error.run_index == 0
        assert error.backend == "pdf"
        assert error.font_names
        assert "U+E000" in str(error)

    def test_nothing_written_on_encoding_error(self, tmp_path):
        out = tmp_path / "never.pdf"
        doc = make_document(Sequence([Paragraph([TextRun("\ue000")])]))
        with pytest.raises(ExportEncodingError):
            PdfRenderer().render(doc, out)
        assert not out.exists()

    def test_arabic_without_rtl_font_raises(self, tmp_path):
        provider = FontProvider(font_dirs=[tmp_path])
        provider._loaded["rtl"] = None
        doc = make_document(Sequence([Paragraph([TextRun("مرحبا", Direction.RTL, "ar")])]))
        fonts = PdfFontSet.from_provider(provider)
        if fonts.regular.covers("م"):
            pytest.skip("regular font already covers Arabic")
        with pytest.raises(ExportEncodingError):
            PdfRenderer(font_provider=provider).render_to_bytes(doc)

    def test_no_fonts_at_all(self):
        with pytest.raises(ExportError, match="No TrueType font"):
            PdfFontSet({"regular": None})

    @needs_rtl_font
    def test_arabic_document_renders(self, sample_doc):
        reader = read_pdf(PdfRenderer().render_to_bytes(sample_doc))
        assert len(reader.pages) >= 1
        assert reader.metadata.title == "PDX Demo Document"


@pytest.mark.unit
class TestPdfImages:
    """Tests for image handling."""

    def test_missing_image_draws_placeholder(self, caplog):
        doc = make_document(Sequence([Image("missing.png", "Missing chart")]))
        data = PdfRenderer().render_to_bytes(doc)
        assert data.startswith(b"%PDF-")
        assert "drawing a placeholder" in caplog.text

    def test_missing_image_strict(self):
        doc = make_document(Sequence([Image("missing.png")]))
        with pytest.raises(UnresolvedResourceError):
            PdfRenderer(PdfRendererOptions(fail_on_resource_errors=True)).render_to_bytes(doc)

    def test_embeds_real_image(self, png_file):
        from pdxdoc.resources import Resources

        doc = make_document(Sequence([Image(png_file.name)]), resources=Resources(base_dir=png_file.parent))
        data = PdfRenderer().render_to_bytes(doc)
        assert b"/Image" in data or b"/XObject" in data
        assert doc.resources.dimensions(png_file.name) == (40, 20)


@pytest.mark.unit
class TestPdfPurity:
    """Tests for read-only exports."""

    def test_export_does_not_mutate(self):
        doc = make_document(parse("# Title\n\n- a\n- b\n\n```\ncode\n```"))
        before = copy.deepcopy(doc)
        PdfRenderer().render_to_bytes(doc)
        assert doc == before

    def test_font_metric_measurer(self):
        fonts = PdfFontSet.from_provider(FontProvider())
        fonts.register()
        measurer = FontMetricMeasurer(fonts)
        assert measurer.measure("WWW", 12) > measurer.measure("iii", 12)
        assert measurer.measure("abc", 24) == pytest.approx(2 * measurer.measure("abc", 12))
