#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/renderers/markup.py
"""Node tree to markup text serializer.

The output re-parses to the same tree: blocks are separated by blank lines,
emphasis changes become toggle markers, and any text that would otherwise be
read as markup (asterisks, backslashes, a leading block marker) is escaped.

"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from pathlib import Path
from typing import IO, Union

from pdxdoc.ast.document import Document
from pdxdoc.ast.nodes import (
    PLAIN,
    CodeBlock,
    Divider,
    Emphasis,
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
from pdxdoc.constants import FENCE_CHAR, MIN_FENCE_LENGTH
from pdxdoc.parsers.markup import TokenType, classify_line
from pdxdoc.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^(\d+)\.")


def _emphasis_marker(current: Emphasis, target: Emphasis) -> str:
    bold_changed = current.bold != target.bold
    italic_changed = current.italic != target.italic
    if bold_changed and italic_changed:
        return "***"
    if bold_changed:
        return "**"
    if italic_changed:
        return "*"
    return ""


def escape_inline(text: str) -> str:
    """Escape characters that carry inline meaning."""
    return text.replace("\\", "\\\\").replace("*", "\\*")


def escape_line_start(line: str) -> str:
    """Escape the first character of a line that would parse as a block construct."""
    stripped = line.strip()
    if not stripped:
        return line
    token_type, _, _ = classify_line(stripped)
    if token_type is TokenType.TEXT:
        return line
    match = _LEADING_NUMBER.match(line)
    if match:
        digits = match.group(1)
        return f"{digits}\\{line[len(digits):]}"
    return "\\" + line


def render_runs(runs: list[TextRun]) -> list[str]:
    """Render runs to markup lines, one line per soft-break-separated segment."""
    lines: list[str] = []
    parts: list[str] = []
    state = PLAIN
    for run in runs:
        if run.is_soft_break:
            parts.append(_emphasis_marker(state, PLAIN))
            state = PLAIN
            lines.append("".join(parts))
            parts = []
            continue
        if not run.text:
            continue
        parts.append(_emphasis_marker(state, run.emphasis))
        state = run.emphasis
        parts.append(escape_inline(run.text))
    parts.append(_emphasis_marker(state, PLAIN))
    lines.append("".join(parts))
    return lines


def _single_line(runs: list[TextRun]) -> str:
    return " ".join(line.strip() for line in render_runs(runs))


def _format_dimension(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


class MarkupRenderer(NodeVisitor, BaseRenderer):
    """Serialize a document or node tree to markup text.

    Examples
    --------
        >>> from pdxdoc.parsers.markup import parse
        >>> text = "# Title\\n\\n- one\\n- two"
        >>> MarkupRenderer().render_to_string(parse(text)) == text
        True

    """

    format_name = "markup"

    def render_to_string(self, doc: Union[Document, Node]) -> str:  # type: ignore[override]
        node = doc.content if isinstance(doc, Document) else doc
        return node.accept(self)

    def render(  # type: ignore[override]
        self, doc: Union[Document, Node], output: Union[str, Path, IO[bytes], IO[str]]
    ) -> None:
        self.write_text_output(self.render_to_string(doc) + "\n", output)

    def visit_sequence(self, node: Sequence) -> str:
        blocks = [child.accept(self) for child in node.children]
        return "\n\n".join(block for block in blocks if block)

    def visit_heading(self, node: Heading) -> str:
        text = _single_line(node.runs)
        hashes = "#" * node.level
        return f"{hashes} {text}" if text else hashes

    def visit_paragraph(self, node: Paragraph) -> str:
        if not node.runs:
            return ""
        return "\n".join(escape_line_start(line) for line in render_runs(node.runs))

    def visit_list(self, node: List) -> str:
        lines = []
        for index, item in enumerate(node.items, start=1):
            marker = f"{index}." if node.ordered else "-"
            text = _single_line(item)
            lines.append(f"{marker} {text}" if text else marker)
        return "\n".join(lines)

    def visit_code_block(self, node: CodeBlock) -> str:
        code_lines = node.text.split("\n") if node.text else []
        longest = max(
            (len(line.strip()) for line in code_lines if line.strip() and set(line.strip()) == {FENCE_CHAR}),
            default=0,
        )
        fence = FENCE_CHAR * max(MIN_FENCE_LENGTH, longest + 1)
        opening = fence + (node.language or "")
        return "\n".join([opening, *code_lines, fence])

    def visit_image(self, node: Image) -> str:
        text = f"![{node.alt_text}]({node.path})"
        attrs = []
        if node.width is not None:
            attrs.append(f"width={_format_dimension(node.width)}")
        if node.height is not None:
            attrs.append(f"height={_format_dimension(node.height)}")
        if attrs:
            text += "{" + " ".join(attrs) + "}"
        return text

    def visit_divider(self, node: Divider) -> str:
        return "---"

    def visit_page_break(self, node: PageBreak) -> str:
        return "==="


def serialize(node: Union[Document, Node]) -> str:
    """Serialize a document or node tree to markup text."""
    return MarkupRenderer().render_to_string(node)


__all__ = ["MarkupRenderer", "serialize", "render_runs", "escape_inline", "escape_line_start"]
