#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markup_serializer.py
"""Unit tests for MarkupRenderer (tree to markup text)."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pdxdoc.ast.nodes import (
    CodeBlock,
    Direction,
    Divider,
    Emphasis,
    Heading,
    Image,
    List,
    PageBreak,
    Paragraph,
    Sequence,
    TextRun,
)
from pdxdoc.parsers.markup import parse
from pdxdoc.renderers.markup import MarkupRenderer, escape_line_start, render_runs, serialize
from pdxdoc.sample import create_sample_document


@pytest.mark.unit
class TestSerializeBlocks:
    """Tests for block output."""

    def test_heading(self):
        assert serialize(Heading(2, [TextRun("Title")])) == "## Title"

    def test_empty_heading(self):
        assert serialize(Heading(4)) == "####"

    def test_paragraph_with_soft_break(self):
        node = Paragraph([TextRun("one"), TextRun.soft_break(), TextRun("two")])
        assert serialize(node) == "one\ntwo"

    def test_lists_are_renumbered(self):
        assert serialize(List(ordered=True, items=[[TextRun("a")], [TextRun("b")]])) == "1. a\n2. b"
        assert serialize(List(ordered=False, items=[[TextRun("a")]])) == "- a"

    def test_empty_list_item_is_bare_marker(self):
        assert serialize(List(ordered=False, items=[[TextRun("a")], []])) == "- a\n-"
        assert serialize(List(ordered=True, items=[[]])) == "1."

    def test_code_block(self):
        assert serialize(CodeBlock("py", "x = 1")) == "```py\nx = 1\n```"

    def test_code_fence_grows_past_content(self):
        text = serialize(CodeBlock(None, "```\ninner"))
        assert text.startswith("````\n")
        assert text.endswith("\n````")

    def test_image_attributes(self):
        assert serialize(Image("a.png", "Alt", width=100, height=50.5)) == "![Alt](a.png){width=100 height=50.5}"
        assert serialize(Image("a.png")) == "![](a.png)"

    def test_small_dimension_has_no_exponent(self):
        assert serialize(Image("a.png", width=0.00001)) == "![](a.png){width=0.00001}"

    def test_divider_and_page_break(self):
        assert serialize(Sequence([Divider(), PageBreak()])) == "---\n\n==="

    def test_blocks_separated_by_blank_lines(self):
        tree = Sequence([Heading(1, [TextRun("T")]), Paragraph([TextRun("p")])])
        assert serialize(tree) == "# T\n\np"

    def test_document_input(self):
        doc = create_sample_document()
        assert serialize(doc) == serialize(doc.content)


@pytest.mark.unit
class TestInlineEscaping:
    """Tests for emphasis markers and escapes."""

    def test_emphasis_markers(self):
        runs = [
            TextRun("a "),
            TextRun("b", emphasis=Emphasis(bold=True)),
            TextRun("c", emphasis=Emphasis(bold=True, italic=True)),
            TextRun("d"),
        ]
        assert render_runs(runs) == ["a **b*c***d"]

    def test_emphasis_closed_at_soft_break(self):
        runs = [TextRun("a", emphasis=Emphasis(italic=True)), TextRun.soft_break(), TextRun("b")]
        assert render_runs(runs) == ["*a*", "b"]

    def test_literal_asterisks_and_backslashes(self):
        assert serialize(Paragraph([TextRun("2*3 \\ 4")])) == "2\\*3 \\\\ 4"

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("# hash", "\\# hash"),
            ("- dash", "\\- dash"),
            ("12. twelve", "12\\. twelve"),
            ("---", "\\---"),
            ("```", "\\```"),
            ("plain", "plain"),
        ],
    )
    def test_escape_line_start(self, line, expected):
        assert escape_line_start(line) == expected

    def test_block_lookalike_paragraph_round_trips(self):
        tree = Sequence([Paragraph([TextRun("# not a heading", Direction.LTR)])])
        assert parse(serialize(tree)) == tree


@pytest.mark.unit
class TestRoundTrip:
    """Tests for parse(serialize(tree)) == tree on parsed trees."""

    def test_round_trip_all_blocks(self, markup_text):
        tree = parse(markup_text)
        assert parse(serialize(tree)) == tree

    def test_round_trip_sample_document(self):
        tree = create_sample_document().content
        assert parse(serialize(tree)) == tree

    def test_round_trip_mixed_emphasis_and_direction(self):
        tree = parse("**مرحبا** world *عالم* end\nsecond مرحبا line")
        assert parse(serialize(tree)) == tree

    @pytest.mark.parametrize("ordered", [False, True])
    def test_round_trip_empty_list_items(self, ordered):
        items = [[TextRun("a", Direction.LTR)], [], [TextRun("b", Direction.LTR)], []]
        tree = Sequence([List(ordered=ordered, items=items)])
        assert parse(serialize(tree)) == tree

    def test_lone_marker_paragraph_round_trips(self):
        tree = Sequence([Paragraph([TextRun("-", Direction.LTR)]), Paragraph([TextRun("7.", Direction.LTR)])])
        assert parse(serialize(tree)) == tree

    def test_round_trip_unterminated_fence(self):
        tree = parse("```\ncode\n")
        assert parse(serialize(tree)) == tree

    def test_render_to_string_and_file(self, tmp_path):
        tree = parse("# T\n\nbody")
        out = tmp_path / "out.txt"
        MarkupRenderer().render(tree, out)
        assert out.read_text(encoding="utf-8") == "# T\n\nbody\n"


_ALPHABET = list("abZ مرب#-*`!\\[](){}=1.•\n")


@pytest.mark.unit
@pytest.mark.fuzzing
class TestRoundTripProperties:
    """Property-based round-trip checks."""

    @given(st.text(alphabet=_ALPHABET, max_size=80))
    def test_parse_serialize_parse(self, text):
        tree = parse(text)
        assert parse(serialize(tree)) == tree

    @given(st.lists(st.text(alphabet=list("ab مر*\\#-"), min_size=1, max_size=12), min_size=1, max_size=4))
    def test_paragraph_lines(self, lines):
        tree = parse("\n".join(line for line in lines if line.strip()))
        assert parse(serialize(tree)) == tree
