#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_export_pipeline.py
"""Integration tests for the full markup -> container -> export pipeline."""

import copy
from io import BytesIO

import pytest
from utils import PIL_AVAILABLE, PYPDF_AVAILABLE, REPORTLAB_AVAILABLE, SHAPING_AVAILABLE, rtl_font_available

from pdxdoc import (
    Direction,
    Document,
    Heading,
    Image,
    List,
    PageBreak,
    Paragraph,
    Sequence,
    TextRun,
    export,
    layout,
    load_document,
    open_document,
    parse,
    save_document,
    serialize,
)
from pdxdoc.layout.primitives import Break, ImageBlock, TextBlock
from pdxdoc.options import PdfRendererOptions, PngRendererOptions

BILINGUAL_MARKUP = """# Annual Report

Revenue grew **12%** this year.

## ملخص التقرير

نما الدخل بنسبة **PDX** هذا العام.

- first point
- second point

1. خطوة أولى
2. خطوة ثانية

```
total = sum(values)
```

![Revenue chart](chart.png){width=160 height=90}

===

Appendix text.
"""


@pytest.fixture
def project_dir(tmp_path):
    """A directory holding the markup source and, when Pillow exists, its chart."""
    (tmp_path / "report.txt").write_text(BILINGUAL_MARKUP, encoding="utf-8")
    if PIL_AVAILABLE:
        from PIL import Image as PILImage

        PILImage.new("RGB", (320, 180), (20, 120, 200)).save(tmp_path / "chart.png")
    return tmp_path


@pytest.mark.integration
class TestMarkupPipeline:
    """Markup through the container and back."""

    def test_parse_shapes(self, project_dir):
        doc = open_document(project_dir / "report.txt")
        kinds = [type(node).__name__ for node in doc.content.children]
        assert kinds == [
            "Heading",
            "Paragraph",
            "Heading",
            "Paragraph",
            "List",
            "List",
            "CodeBlock",
            "Image",
            "PageBreak",
            "Paragraph",
        ]
        assert doc.title == "Annual Report"
        arabic_heading = doc.content.children[2]
        assert isinstance(arabic_heading, Heading)
        assert arabic_heading.runs[0].direction is Direction.RTL

    def test_container_round_trip(self, project_dir):
        doc = open_document(project_dir / "report.txt")
        container = project_dir / "report.pdx"
        save_document(doc, container)
        loaded = load_document(container)
        assert loaded == doc
        assert serialize(loaded) == serialize(doc)

    def test_markup_is_stable(self, project_dir):
        first = serialize(parse(BILINGUAL_MARKUP))
        assert serialize(parse(first)) == first

    def test_layout_of_loaded_container(self, project_dir):
        doc = open_document(project_dir / "report.txt")
        save_document(doc, project_dir / "report.pdx")
        loaded = load_document(project_dir / "report.pdx")
        primitives = layout(loaded.content, loaded.stylesheet, resources=loaded.resources)
        assert any(isinstance(p, Break) and p.forced for p in primitives)
        rtl_blocks = [p for p in primitives if isinstance(p, TextBlock) and p.base_direction is Direction.RTL]
        assert len(rtl_blocks) == 4
        images = [p for p in primitives if isinstance(p, ImageBlock)]
        assert len(images) == 1
        assert (images[0].size.width, images[0].size.height) == (160, 90)

    def test_html_export(self, project_dir):
        doc = open_document(project_dir / "report.txt")
        before = copy.deepcopy(doc)
        html = export(doc, "html")
        assert '<h2 dir="rtl" lang="ar"' in html
        assert '<ol dir="rtl">' in html
        assert 'src="chart.png"' in html
        assert '<div class="pdx-page-break"></div>' in html
        assert doc == before

    def test_edit_then_export(self, project_dir):
        doc = open_document(project_dir / "report.txt")
        doc.edit_run(1, 0, "الإيرادات ")
        doc.insert(len(doc.content), Paragraph(list(doc.content.children[0].runs)))
        html = export(doc, "html")
        assert '<p dir="rtl"' in html
        markup = export(doc, "markup")
        assert markup.endswith("\n\nAnnual Report")


@pytest.mark.integration
@pytest.mark.pdf
@pytest.mark.skipif(
    not (REPORTLAB_AVAILABLE and SHAPING_AVAILABLE and rtl_font_available()),
    reason="reportlab, shaping libs or an Arabic font missing",
)
class TestPdfPipeline:
    """Exports through ReportLab."""

    def test_pdf_export(self, project_dir):
        doc = open_document(project_dir / "report.txt")
        data = export(doc, "pdf", options=PdfRendererOptions(include_page_numbers=True))
        assert data.startswith(b"%PDF-")
        if PYPDF_AVAILABLE:
            from pypdf import PdfReader

            reader = PdfReader(BytesIO(data))
            assert len(reader.pages) == 2
            assert reader.metadata.title == "Annual Report"

    def test_pdf_to_file(self, project_dir):
        doc = open_document(project_dir / "report.txt")
        out = project_dir / "report.pdf"
        assert export(doc, "pdf", out) is None
        assert out.stat().st_size > 0


@pytest.mark.integration
@pytest.mark.png
@pytest.mark.skipif(not (PIL_AVAILABLE and SHAPING_AVAILABLE), reason="Pillow or shaping libs missing")
class TestPngPipeline:
    """Exports through Pillow."""

    def test_png_export(self, project_dir):
        from PIL import Image as PILImage

        doc = open_document(project_dir / "report.txt")
        data = export(doc, "png", options=PngRendererOptions(width=600, height=800, margin=24))
        image = PILImage.open(BytesIO(data))
        assert image.size == (600, 800)
        assert image.mode == "RGBA"

    def test_png_with_page_break_and_list(self):
        doc = Document(content=Sequence([List(items=[[TextRun("a")]]), PageBreak(), Image("nowhere.png")]))
        data = export(doc, "png", options=PngRendererOptions(width=200, height=200, margin=10))
        assert data.startswith(b"\x89PNG")
