#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/layout/engine.py
"""Layout engine: node tree + style sheet + zoom -> positioned draw primitives.

The engine makes one top-to-bottom pass over the tree, accumulating a
vertical cursor. Text is wrapped word by word in logical order against the
available width; each finished line is then put into visual order with
:func:`pdxdoc.bidi.visual_order` using the block's base direction.

When ``LayoutOptions.page_height`` is set the pass also paginates: a text
block that reaches the bottom of a page is split at a line boundary, an image
or rule that does not fit moves to the next page, and every page opened emits
a :class:`Break`. PageBreak nodes always open a new page.

Nothing is cached between calls, so results always reflect the zoom and
resources passed in.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from pdxdoc.ast.nodes import (
    CodeBlock,
    Direction,
    Divider,
    Heading,
    Image,
    List,
    Node,
    PageBreak,
    Paragraph,
    Sequence,
    TextRun,
)
from pdxdoc.ast.visitors import NodeVisitor
from pdxdoc.bidi import base_direction, list_marker, marker_edge, resolve_direction, visual_order
from pdxdoc.layout.measure import HeuristicMeasurer, TextMeasurer
from pdxdoc.layout.primitives import (
    Break,
    DrawPrimitive,
    ImageBlock,
    ListMarker,
    Point,
    Rule,
    Size,
    TextBlock,
    TextLine,
    VisualRun,
    primitive_bottom,
)
from pdxdoc.options.layout import LayoutOptions
from pdxdoc.resources import Resources
from pdxdoc.styles import StyleRule, StyleSheet
from pdxdoc.utils.decorators import debug_timer

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r"\s+|\S+")

# Ascent as a fraction of the font size, used to place baselines.
ASCENT_RATIO = 0.8


@dataclass(frozen=True)
class LayoutResult:
    """Output of one layout pass.

    Parameters
    ----------
    primitives : tuple of DrawPrimitive
        Primitives in drawing order
    page_indices : tuple of int
        Page of each primitive (all 0 for continuous layout)
    total_height : float
        Bottom of the lowest primitive
    page_count : int
        Number of pages (1 for continuous layout)
    page_height : float or None
        Page height used, if paginated

    """

    primitives: tuple[DrawPrimitive, ...]
    page_indices: tuple[int, ...]
    total_height: float
    page_count: int
    page_height: Optional[float]

    def pages(self) -> list[list[DrawPrimitive]]:
        """Group primitives by page."""
        grouped: list[list[DrawPrimitive]] = [[] for _ in range(self.page_count)]
        for primitive, page in zip(self.primitives, self.page_indices):
            grouped[max(page, 0)].append(primitive)
        return grouped


@dataclass
class _Fragment:
    text: str
    width: float
    run_index: int
    run: TextRun
    direction: Direction

    @property
    def is_space(self) -> bool:
        return self.text.isspace()


@dataclass(frozen=True)
class _LineBox:
    runs: tuple[VisualRun, ...]
    width: float


class LayoutEngine(NodeVisitor):
    """Compute draw primitives for a node tree.

    Parameters
    ----------
    stylesheet : StyleSheet
        Style rules; a snapshot is taken for the pass
    zoom : float, default 1.0
        Multiplies font sizes, spacing, indents and image sizes before wrapping
    options : LayoutOptions, optional
        Page geometry and placeholder sizes
    resources : Resources, optional
        Consulted (without blocking) for intrinsic image dimensions
    measurer : TextMeasurer, optional
        Width provider; defaults to :class:`HeuristicMeasurer`

    Examples
    --------
        >>> from pdxdoc import parse
        >>> engine = LayoutEngine(StyleSheet.default(), zoom=1.5)
        >>> result = engine.run(parse("# Title\\n\\nBody"))
        >>> [type(p).__name__ for p in result.primitives]
        ['TextBlock', 'TextBlock']

    """

    def __init__(
        self,
        stylesheet: StyleSheet | None = None,
        zoom: float = 1.0,
        options: LayoutOptions | None = None,
        resources: Resources | None = None,
        measurer: TextMeasurer | None = None,
    ):
        if zoom <= 0:
            raise ValueError(f"zoom must be positive, got {zoom}")
        self.stylesheet = stylesheet if stylesheet is not None else StyleSheet.default()
        self.zoom = zoom
        self.options = options or LayoutOptions()
        self.resources = resources
        self.measurer: TextMeasurer = measurer or HeuristicMeasurer()
        self._reset()

    def _reset(self) -> None:
        self._styles = self.stylesheet.snapshot()
        self._primitives: list[DrawPrimitive] = []
        self._page_indices: list[int] = []
        self._cursor = 0.0
        self._page = 0
        self._path: list[int] = []
        self._list_group = 0

    # ------------------------------------------------------------------ public

    def run(self, node: Node) -> LayoutResult:
        """Lay out ``node`` and return the primitives with page bookkeeping."""
        self._reset()
        with debug_timer(logger, "Layout"):
            node.accept(self)

        total_height = max((primitive_bottom(p) for p in self._primitives), default=0.0)
        page_count = self._page + 1 if self.options.page_height else 1
        logger.debug("Layout produced %d primitives over %d page(s)", len(self._primitives), page_count)
        return LayoutResult(
            primitives=tuple(self._primitives),
            page_indices=tuple(self._page_indices),
            total_height=total_height,
            page_count=page_count,
            page_height=self.options.page_height,
        )

    # ----------------------------------------------------------------- helpers

    @property
    def page_width(self) -> float:
        return self.options.page_width

    def _style(self, key: str) -> StyleRule:
        return self._styles.get(key).scaled(self.zoom)

    def _emit(self, primitive: DrawPrimitive) -> None:
        self._primitives.append(primitive)
        self._page_indices.append(self._page if self.options.page_height else 0)

    def _page_top(self) -> float:
        return self._page * (self.options.page_height or 0.0)

    def _page_bottom(self) -> float:
        page_height = self.options.page_height
        return float("inf") if page_height is None else (self._page + 1) * page_height

    def _new_page(self, forced: bool) -> None:
        page_height = self.options.page_height
        assert page_height is not None
        self._page += 1
        self._cursor = self._page * page_height
        self._emit(Break(Point(0.0, self._cursor), forced, self._page, tuple(self._path)))

    def _ensure_room(self, height: float) -> None:
        """Open a new page if ``height`` does not fit below the cursor."""
        if self.options.page_height is None:
            return
        if self._cursor >= self._page_bottom() or (
            self._cursor + height > self._page_bottom() and self._cursor > self._page_top()
        ):
            self._new_page(forced=False)

    def _finish_block(self, style: StyleRule) -> None:
        self._cursor += style.space_after + self.options.block_gap * self.zoom

    def _line_metrics(self, style: StyleRule) -> tuple[float, float]:
        height = style.font_size * style.line_height
        baseline = (height - style.font_size) / 2 + style.font_size * ASCENT_RATIO
        return height, baseline

    def _measure(self, text: str, style: StyleRule, run: TextRun, direction: Direction) -> float:
        return self.measurer.measure(
            text,
            style.font_size,
            bold=style.bold or run.emphasis.bold,
            italic=run.emphasis.italic,
            monospace=style.monospace,
            direction=direction,
        )

    # ---------------------------------------------------------------- wrapping

    def _split_long(self, fragment: _Fragment, style: StyleRule, width: float) -> list[_Fragment]:
        """Break a single over-long word into pieces no wider than ``width``."""
        pieces: list[_Fragment] = []
        current = ""
        for ch in fragment.text:
            candidate = current + ch
            if current and self._measure(candidate, style, fragment.run, fragment.direction) > width:
                pieces.append(self._fragment(current, fragment, style))
                current = ch
            else:
                current = candidate
        if current:
            pieces.append(self._fragment(current, fragment, style))
        return pieces

    def _fragment(self, text: str, source: _Fragment, style: StyleRule) -> _Fragment:
        width = self._measure(text, style, source.run, source.direction)
        return _Fragment(text, width, source.run_index, source.run, source.direction)

    def wrap(self, runs: list[TextRun], style: StyleRule, width: float) -> list[list[_Fragment]]:
        """Wrap runs into lines of fragments (logical order)."""
        lines: list[list[_Fragment]] = []
        current: list[_Fragment] = []
        current_width = 0.0

        def finish() -> None:
            while current and current[-1].is_space:
                current.pop()
            lines.append(list(current))

        for run_index, run in enumerate(runs):
            if run.is_soft_break:
                finish()
                current.clear()
                current_width = 0.0
                continue
            direction = resolve_direction(run)
            for piece in _TOKEN_PATTERN.findall(run.text):
                fragment = _Fragment(piece, self._measure(piece, style, run, direction), run_index, run, direction)
                if fragment.is_space:
                    if current:
                        current.append(fragment)
                        current_width += fragment.width
                    continue
                if current and current_width + fragment.width > width:
                    finish()
                    current.clear()
                    current_width = 0.0
                if fragment.width > width:
                    pieces = self._split_long(fragment, style, width)
                    for piece_fragment in pieces[:-1]:
                        current.append(piece_fragment)
                        finish()
                        current.clear()
                    fragment = pieces[-1]
                current.append(fragment)
                current_width += fragment.width
        finish()
        return lines

    def _merge_fragments(self, fragments: list[_Fragment]) -> list[_Fragment]:
        merged: list[_Fragment] = []
        for fragment in fragments:
            if merged and merged[-1].run_index == fragment.run_index:
                last = merged[-1]
                merged[-1] = _Fragment(
                    last.text + fragment.text, last.width + fragment.width, last.run_index, last.run, last.direction
                )
            else:
                merged.append(fragment)
        return merged

    def _arrange(
        self, fragments: list[_Fragment], base: Direction, style: StyleRule, region_x: float, region_width: float
    ) -> _LineBox:
        """Order a wrapped line visually and assign x offsets."""
        merged = self._merge_fragments(fragments)
        proxies = [TextRun(f.text, f.direction, f.run.language_hint, f.run.emphasis) for f in merged]
        order = visual_order(proxies, base)
        line_width = sum(f.width for f in merged)

        alignment = "start" if style.alignment == "justify" else style.alignment
        align_right = (alignment == "start") == (base is Direction.RTL)
        if alignment == "center":
            offset = (region_width - line_width) / 2
        elif align_right:
            offset = region_width - line_width
        else:
            offset = 0.0
        x = region_x + max(offset, 0.0)

        placed: list[VisualRun] = []
        for index in order:
            f = merged[index]
            placed.append(VisualRun(f.text, x, f.width, f.direction, f.run.emphasis, f.run.language_hint, f.run_index))
            x += f.width
        return _LineBox(tuple(placed), line_width)

    # --------------------------------------------------------------- placement

    def _place_lines(
        self,
        boxes: list[_LineBox],
        style: StyleRule,
        base: Direction,
        role: str,
        source_runs: tuple[TextRun, ...] = (),
        **extra,
    ) -> None:
        """Emit TextBlocks for ``boxes``, splitting at page boundaries."""
        line_height, baseline = self._line_metrics(style)
        path = tuple(self._path)
        language = extra.pop("language", None) or next((r.language_hint for r in source_runs if r.language_hint), None)
        chunk: list[TextLine] = []
        chunk_top = self._cursor
        continued = False

        def flush() -> None:
            nonlocal continued
            if not chunk:
                return
            block_extra = dict(extra)
            if continued:
                block_extra["marker"] = None
            self._emit(
                TextBlock(
                    role=role,  # type: ignore[arg-type]
                    lines=tuple(chunk),
                    position=Point(0.0, chunk_top),
                    size=Size(self.page_width, self._cursor - chunk_top),
                    style=style,
                    base_direction=base,
                    node_path=path,
                    source_runs=source_runs,
                    language=language,
                    continued=continued,
                    **block_extra,
                )
            )
            chunk.clear()
            continued = True

        for box in boxes:
            if self.options.page_height is not None and (
                self._cursor >= self._page_bottom()
                or (self._cursor + line_height > self._page_bottom() and (chunk or self._cursor > self._page_top()))
            ):
                flush()
                self._new_page(forced=False)
            if not chunk:
                chunk_top = self._cursor
            chunk.append(
                TextLine(
                    runs=box.runs,
                    y=self._cursor - chunk_top,
                    height=line_height,
                    baseline=baseline,
                    width=box.width,
                )
            )
            self._cursor += line_height
        flush()

    def _layout_runs(
        self,
        runs: list[TextRun],
        style: StyleRule,
        role: str,
        region_x: float,
        region_width: float,
        base: Direction,
        **extra,
    ) -> None:
        lines = self.wrap(runs, style, region_width) or [[]]
        boxes = [self._arrange(line, base, style, region_x, region_width) for line in lines]
        self._place_lines(boxes, style, base, role, tuple(runs), **extra)

    # ------------------------------------------------------------------ visits

    def visit_sequence(self, node: Sequence) -> None:
        for index, child in enumerate(node.children):
            self._path.append(index)
            child.accept(self)
            self._path.pop()

    def visit_heading(self, node: Heading) -> None:
        style = self._style(f"heading{node.level}")
        base = base_direction(node.runs)
        self._cursor += style.space_before
        self._layout_runs(node.runs, style, "heading", 0.0, self.page_width, base, level=node.level)
        self._finish_block(style)

    def visit_paragraph(self, node: Paragraph) -> None:
        base = base_direction(node.runs)
        style = self._style("arabic" if base is Direction.RTL else "paragraph")
        self._cursor += style.space_before
        self._layout_runs(node.runs, style, "paragraph", 0.0, self.page_width, base)
        self._finish_block(style)

    def visit_list(self, node: List) -> None:
        style = self._style("list")
        indent = self.options.list_indent * self.zoom
        gap = self.options.marker_gap * self.zoom
        group = self._list_group
        self._list_group += 1

        for item_index, item in enumerate(node.items):
            base = base_direction(item)
            text = list_marker(node.ordered, item_index, base)
            marker_run = TextRun(text, Direction.LTR)
            marker_width = self._measure(text, style, marker_run, Direction.LTR)
            if marker_edge(base) == "right":
                marker = ListMarker(text, self.page_width - marker_width, marker_width)
                region_x = 0.0
            else:
                marker = ListMarker(text, max(indent - gap - marker_width, 0.0), marker_width)
                region_x = indent
            self._cursor += style.space_before
            self._path.append(item_index)
            self._layout_runs(
                item,
                style,
                "list_item",
                region_x,
                max(self.page_width - indent, 1.0),
                base,
                list_group=group,
                item_index=item_index,
                ordered=node.ordered,
                marker=marker,
            )
            self._path.pop()
            self._finish_block(style)

    def visit_code_block(self, node: CodeBlock) -> None:
        style = self._style("code")
        self._cursor += style.space_before
        source = TextRun(node.text, Direction.LTR)
        boxes: list[_LineBox] = []
        for line in node.text.split("\n"):
            fragment = _Fragment(line, self._measure(line, style, source, Direction.LTR), 0, source, Direction.LTR)
            pieces = [fragment]
            if fragment.width > self.page_width:
                pieces = self._split_long(fragment, style, self.page_width)
            for piece in pieces:
                runs = (
                    (VisualRun(piece.text, 0.0, piece.width, Direction.LTR, source.emphasis, None, 0),)
                    if piece.text
                    else ()
                )
                boxes.append(_LineBox(runs, piece.width))
        self._place_lines(boxes, style, Direction.LTR, "code", (source,), language=node.language)
        self._finish_block(style)

    def image_size(self, node: Image) -> tuple[Size, bool]:
        """Return the display size of an image and whether it is a placeholder."""
        dims = self.resources.dimensions(node.path) if self.resources is not None else None
        if node.width is not None and node.height is not None:
            width, height = node.width, node.height
        else:
            if dims is not None:
                base_w, base_h = float(dims[0]), float(dims[1])
            else:
                base_w, base_h = self.options.placeholder_width, self.options.placeholder_height
            if node.width is not None:
                width, height = node.width, node.width * base_h / base_w
            elif node.height is not None:
                width, height = node.height * base_w / base_h, node.height
            else:
                width, height = base_w, base_h

        width, height = width * self.zoom, height * self.zoom
        if width > self.page_width:
            height *= self.page_width / width
            width = self.page_width
        page_height = self.options.page_height
        if page_height is not None and height > page_height:
            width *= page_height / height
            height = page_height
        return Size(width, height), dims is None

    def visit_image(self, node: Image) -> None:
        style = self._style("image")
        size, placeholder = self.image_size(node)
        if placeholder:
            logger.debug("Image %s unresolved; reserving %.0fx%.0f placeholder", node.path, size.width, size.height)
        self._cursor += style.space_before
        self._ensure_room(size.height)
        if style.alignment == "center":
            x = (self.page_width - size.width) / 2
        elif style.alignment == "end":
            x = self.page_width - size.width
        else:
            x = 0.0
        self._emit(ImageBlock(node.path, Point(x, self._cursor), size, node.alt_text, placeholder, tuple(self._path)))
        self._cursor += size.height
        self._finish_block(style)

    def visit_divider(self, node: Divider) -> None:
        style = self._style("divider")
        self._cursor += style.space_before
        self._ensure_room(0.0)
        self._emit(Rule(Point(0.0, self._cursor), self.page_width, style.color, tuple(self._path)))
        if self.options.divider_breaks_page and self.options.page_height is not None:
            self._new_page(forced=True)
            return
        self._finish_block(style)

    def visit_page_break(self, node: PageBreak) -> None:
        if self.options.page_height is not None:
            self._new_page(forced=True)
            return
        style = self._style("page_break")
        self._cursor += style.space_before
        self._emit(Break(Point(0.0, self._cursor), True, -1, tuple(self._path)))
        self._finish_block(style)


def layout(
    node: Node,
    stylesheet: StyleSheet | None = None,
    zoom: float = 1.0,
    options: LayoutOptions | None = None,
    resources: Resources | None = None,
    measurer: TextMeasurer | None = None,
) -> list[DrawPrimitive]:
    """Lay out a node tree and return its draw primitives.

    Parameters
    ----------
    node : Node
        Root of the tree (usually a Sequence)
    stylesheet : StyleSheet, optional
        Style rules; built-in defaults when omitted
    zoom : float, default 1.0
        Scale for font sizes and spacing, applied before wrapping
    options : LayoutOptions, optional
        Page geometry
    resources : Resources, optional
        Resolved image dimensions
    measurer : TextMeasurer, optional
        Width provider

    Returns
    -------
    list of DrawPrimitive

    """
    return list(LayoutEngine(stylesheet, zoom, options, resources, measurer).run(node).primitives)


__all__ = ["LayoutEngine", "LayoutResult", "layout", "ASCENT_RATIO"]
