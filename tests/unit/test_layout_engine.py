#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_layout_engine.py
"""Unit tests for the layout engine.

Tests cover:
- Determinism of repeated passes
- Zoom applied before wrapping
- Placeholder sizing for unresolved images
- Pagination, forced breaks and block splitting
- Visual run order and list markers for right-to-left text

"""

import math

import pytest
from utils import StaticDecoder

from pdxdoc.ast.nodes import CodeBlock, Direction, Divider, Image, List, PageBreak, Paragraph, Sequence, TextRun
from pdxdoc.layout import (
    Break,
    ImageBlock,
    LayoutEngine,
    Rule,
    TextBlock,
    layout,
)
from pdxdoc.layout.measure import HeuristicMeasurer
from pdxdoc.options.layout import LayoutOptions
from pdxdoc.parsers.markup import parse
from pdxdoc.resources import Resources
from pdxdoc.styles import StyleRule, StyleSheet


def text_blocks(primitives):
    return [p for p in primitives if isinstance(p, TextBlock)]


@pytest.mark.unit
class TestDeterminism:
    """Tests for repeatable layout."""

    def test_same_input_same_output(self, markup_text):
        tree = parse(markup_text)
        assert layout(tree, StyleSheet.default(), 1.0) == layout(tree, StyleSheet.default(), 1.0)

    def test_engine_reusable(self, markup_text):
        engine = LayoutEngine(StyleSheet.default(), zoom=1.25)
        tree = parse(markup_text)
        assert engine.run(tree) == engine.run(tree)

    def test_empty_tree(self):
        result = LayoutEngine().run(Sequence())
        assert result.primitives == ()
        assert result.total_height == 0.0
        assert result.page_count == 1

    def test_invalid_zoom(self):
        with pytest.raises(ValueError):
            LayoutEngine(zoom=0)

    def test_layout_does_not_mutate_tree(self, markup_text):
        tree = parse(markup_text)
        before = parse(markup_text)
        layout(tree, zoom=2.0)
        assert tree == before


@pytest.mark.unit
class TestZoom:
    """Tests for zoom scaling."""

    def test_zoom_scales_font_size(self):
        tree = parse("Some paragraph text")
        normal = text_blocks(layout(tree, zoom=1.0))[0]
        zoomed = text_blocks(layout(tree, zoom=2.0))[0]
        assert zoomed.style.font_size == pytest.approx(normal.style.font_size * 2)
        assert zoomed.size.height == pytest.approx(normal.size.height * 2)

    def test_zoom_applied_before_wrapping(self):
        tree = parse(" ".join(["word"] * 30))
        options = LayoutOptions(page_width=400)
        normal = text_blocks(layout(tree, zoom=1.0, options=options))[0]
        zoomed = text_blocks(layout(tree, zoom=2.0, options=options))[0]
        assert len(zoomed.lines) > len(normal.lines)
        assert all(line.width <= 400 for line in zoomed.lines)

    def test_style_change_between_passes(self):
        tree = parse("text")
        sheet = StyleSheet.default()
        first = text_blocks(layout(tree, sheet))[0]
        sheet.set_rule("paragraph", StyleRule(font_size=30))
        second = text_blocks(layout(tree, sheet))[0]
        assert first.style.font_size == 16
        assert second.style.font_size == 30


@pytest.mark.unit
class TestWrapping:
    """Tests for line breaking."""

    def test_lines_fit_width(self):
        tree = parse(" ".join(["alpha", "beta", "gamma"] * 20))
        block = text_blocks(layout(tree, options=LayoutOptions(page_width=300)))[0]
        assert len(block.lines) > 1
        assert all(line.width <= 300 for line in block.lines)

    def test_long_word_is_split(self):
        tree = parse("x" * 200)
        block = text_blocks(layout(tree, options=LayoutOptions(page_width=100)))[0]
        assert len(block.lines) > 1
        assert "".join(run.text for line in block.lines for run in line.runs) == "x" * 200

    def test_soft_break_starts_new_line(self):
        block = text_blocks(layout(parse("one\ntwo")))[0]
        assert [[run.text for run in line.runs] for line in block.lines] == [["one"], ["two"]]

    def test_code_lines_kept(self):
        tree = Sequence([CodeBlock("py", "a = 1\n\nb = 2")])
        block = text_blocks(layout(tree))[0]
        assert block.role == "code"
        assert block.language == "py"
        assert len(block.lines) == 3
        assert block.lines[1].runs == ()
        assert block.style.monospace


@pytest.mark.unit
class TestImages:
    """Tests for image sizing."""

    def test_unresolved_image_uses_placeholder(self):
        options = LayoutOptions(placeholder_width=200, placeholder_height=150)
        block = layout(Sequence([Image("missing.png")]), options=options)[0]
        assert isinstance(block, ImageBlock)
        assert block.placeholder
        assert (block.size.width, block.size.height) == (200, 150)

    def test_placeholder_scaled_by_zoom(self):
        options = LayoutOptions(page_width=1000, placeholder_width=200, placeholder_height=150)
        block = layout(Sequence([Image("missing.png")]), zoom=2.0, options=options)[0]
        assert (block.size.width, block.size.height) == (400, 300)

    def test_placeholder_stable_when_resource_fails(self):
        resources = Resources(decoder=StaticDecoder())
        tree = Sequence([Image("missing.png"), Paragraph([TextRun("after")])])
        before = layout(tree, resources=resources)
        resources.try_load("missing.png")
        after = layout(tree, resources=resources)
        assert before == after

    def test_resolved_image_reflows_without_moving_earlier_blocks(self):
        resources = Resources(decoder=StaticDecoder({"a.png": (300, 150)}))
        options = LayoutOptions(page_width=1000, placeholder_width=200, placeholder_height=150)
        tree = Sequence([Paragraph([TextRun("before")]), Image("a.png"), Paragraph([TextRun("after")])])
        before = layout(tree, options=options, resources=resources)
        resources.load("a.png")
        after = layout(tree, options=options, resources=resources)
        assert text_blocks(before)[0] == text_blocks(after)[0]
        old_image = next(p for p in before if isinstance(p, ImageBlock))
        new_image = next(p for p in after if isinstance(p, ImageBlock))
        assert old_image.placeholder and not new_image.placeholder
        assert (old_image.size.width, old_image.size.height) == (200, 150)
        assert (new_image.size.width, new_image.size.height) == (300, 150)
        assert new_image.position.y == old_image.position.y

    @pytest.mark.parametrize("kwargs, expected", [({"width": 100}, (100, 75)), ({"height": 300}, (400, 300))])
    def test_lone_dimension_keeps_placeholder_aspect(self, kwargs, expected):
        options = LayoutOptions(page_width=1000, placeholder_width=200, placeholder_height=150)
        block = layout(Sequence([Image("missing.png", **kwargs)]), options=options)[0]
        assert block.placeholder
        assert (block.size.width, block.size.height) == expected

    def test_resolved_image_uses_intrinsic_size(self, static_resources):
        static_resources.load("wide.png")
        block = layout(Sequence([Image("wide.png")]), resources=static_resources)[0]
        assert not block.placeholder
        assert (block.size.width, block.size.height) == (400, 100)

    def test_explicit_width_keeps_aspect(self, static_resources):
        static_resources.load("wide.png")
        block = layout(Sequence([Image("wide.png", width=200)]), resources=static_resources)[0]
        assert (block.size.width, block.size.height) == (200, 50)

    def test_image_scaled_to_page_width(self, static_resources):
        static_resources.load("wide.png")
        options = LayoutOptions(page_width=200)
        block = layout(Sequence([Image("wide.png")]), options=options, resources=static_resources)[0]
        assert block.size.width == 200
        assert block.size.height == pytest.approx(50)

    def test_layout_never_decodes(self):
        decoder = StaticDecoder({"a.png": (10, 10)})
        layout(Sequence([Image("a.png")]), resources=Resources(decoder=decoder))
        assert decoder.calls == []


@pytest.mark.unit
class TestPagination:
    """Tests for paginated layout."""

    def test_page_break_forces_second_page(self):
        tree = Sequence([Paragraph([TextRun("one")]), PageBreak(), Paragraph([TextRun("two")])])
        result = LayoutEngine(options=LayoutOptions(page_height=500)).run(tree)
        assert result.page_count == 2
        breaks = [p for p in result.primitives if isinstance(p, Break)]
        assert len(breaks) == 1 and breaks[0].forced and breaks[0].page_index == 1
        second = text_blocks(result.primitives)[1]
        assert second.position.y == 500
        assert result.pages()[1][-1] == second

    def test_continuous_layout_marks_page_break(self):
        tree = Sequence([Paragraph([TextRun("one")]), PageBreak()])
        result = LayoutEngine().run(tree)
        assert result.page_count == 1
        breaks = [p for p in result.primitives if isinstance(p, Break)]
        assert breaks[0].forced and breaks[0].page_index == -1

    def test_long_paragraph_split_across_pages(self):
        tree = parse(" ".join(["word"] * 400))
        result = LayoutEngine(options=LayoutOptions(page_width=300, page_height=200)).run(tree)
        blocks = text_blocks(result.primitives)
        assert result.page_count > 1
        assert len(blocks) == result.page_count
        assert not blocks[0].continued and all(b.continued for b in blocks[1:])
        for block, page in zip(result.primitives, result.page_indices):
            if isinstance(block, TextBlock):
                assert block.position.y + block.size.height <= (page + 1) * 200 + 1e-6

    @pytest.mark.parametrize("count", [10, 37, 80, 200, 401])
    def test_page_count_is_ceil_of_total_height(self, count):
        tree = parse("\n\n".join(f"paragraph {i}" for i in range(count)))
        result = LayoutEngine(options=LayoutOptions(page_width=300, page_height=400)).run(tree)
        assert result.page_count == math.ceil(result.total_height / 400)

    def test_page_break_adds_one_page_after_overflow(self):
        body = "\n\n".join(f"paragraph {i}" for i in range(80))
        options = LayoutOptions(page_width=300, page_height=400)
        alone = LayoutEngine(options=options).run(parse(body))
        with_break = LayoutEngine(options=options).run(parse(body + "\n\n===\n\ntail"))
        assert alone.page_count > 1
        assert with_break.page_count == math.ceil(alone.total_height / 400) + 1
        forced = [p for p in with_break.primitives if isinstance(p, Break) and p.forced]
        assert [b.page_index for b in forced] == [alone.page_count]

    def test_height_triggered_breaks_not_forced(self):
        tree = parse(" ".join(["word"] * 400))
        result = LayoutEngine(options=LayoutOptions(page_width=300, page_height=200)).run(tree)
        breaks = [p for p in result.primitives if isinstance(p, Break)]
        assert breaks and not any(b.forced for b in breaks)

    def test_image_moves_to_next_page(self):
        options = LayoutOptions(page_height=200, placeholder_width=100, placeholder_height=180)
        tree = Sequence([Paragraph([TextRun("intro")]), Image("a.png")])
        result = LayoutEngine(options=options).run(tree)
        image = next(p for p in result.primitives if isinstance(p, ImageBlock))
        assert image.position.y >= 200
        assert result.page_count == 2

    def test_divider_as_page_break(self):
        options = LayoutOptions(page_height=500, divider_breaks_page=True)
        tree = Sequence([Paragraph([TextRun("a")]), Divider(), Paragraph([TextRun("b")])])
        result = LayoutEngine(options=options).run(tree)
        assert result.page_count == 2
        assert any(isinstance(p, Rule) for p in result.primitives)

    def test_divider_does_not_break_by_default(self):
        options = LayoutOptions(page_height=500)
        tree = Sequence([Paragraph([TextRun("a")]), Divider(), Paragraph([TextRun("b")])])
        assert LayoutEngine(options=options).run(tree).page_count == 1

    def test_total_height_is_lowest_bottom(self):
        result = LayoutEngine().run(parse("# Title\n\nbody"))
        last = result.primitives[-1]
        assert result.total_height == pytest.approx(last.position.y + last.size.height)


@pytest.mark.unit
class TestBidiLayout:
    """Tests for right-to-left placement."""

    def test_rtl_paragraph_puts_latin_run_leftmost(self, rtl_paragraph):
        block = text_blocks(layout(rtl_paragraph))[0]
        runs = block.lines[0].runs
        assert block.base_direction is Direction.RTL
        assert [run.text for run in runs] == ["PDX", "مرحبا بك في "]
        assert runs[0].x < runs[1].x

    def test_rtl_paragraph_is_right_aligned(self, rtl_paragraph):
        options = LayoutOptions(page_width=500)
        block = text_blocks(layout(rtl_paragraph, options=options))[0]
        line = block.lines[0]
        last = line.runs[-1]
        assert last.x + last.width == pytest.approx(500)

    def test_rtl_paragraph_uses_arabic_style(self, rtl_paragraph):
        block = text_blocks(layout(rtl_paragraph))[0]
        assert block.style == StyleSheet.default().resolve("arabic")
        assert block.language == "ar"

    def test_ltr_paragraph_with_rtl_run(self):
        tree = Sequence([Paragraph([TextRun("Hello ", Direction.LTR), TextRun("مرحبا", Direction.RTL, "ar")])])
        runs = text_blocks(layout(tree))[0].lines[0].runs
        assert [run.text for run in runs] == ["Hello ", "مرحبا"]
        assert runs[0].x == 0.0

    def test_runs_keep_source_index(self, rtl_paragraph):
        runs = text_blocks(layout(rtl_paragraph))[0].lines[0].runs
        assert {run.text: run.run_index for run in runs} == {"PDX": 1, "مرحبا بك في ": 0}

    def test_rtl_list_marker_on_right(self):
        tree = Sequence([List(ordered=True, items=[[TextRun("عنصر", Direction.RTL, "ar")]])])
        options = LayoutOptions(page_width=400)
        block = text_blocks(layout(tree, options=options))[0]
        assert block.marker.text == ".1"
        assert block.marker.x + block.marker.width == pytest.approx(400)
        assert all(run.x + run.width <= 400 - options.list_indent + 1e-6 for run in block.lines[0].runs)

    def test_ltr_list_marker_on_left(self):
        tree = Sequence([List(ordered=False, items=[[TextRun("item", Direction.LTR)], [TextRun("two")]])])
        blocks = text_blocks(layout(tree))
        assert [b.item_index for b in blocks] == [0, 1]
        assert blocks[0].marker.text == "•"
        assert blocks[0].marker.x < blocks[0].lines[0].runs[0].x
        assert blocks[0].list_group == blocks[1].list_group

    def test_custom_measurer(self):
        class Fixed:
            def measure(self, text, font_size, **kwargs):
                return 10.0 * len(text)

        block = text_blocks(layout(parse("abc"), measurer=Fixed()))[0]
        assert block.lines[0].width == 30.0
        assert HeuristicMeasurer().measure("abc", 10) != 30.0
