#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/ast/__init__.py
"""Document model: nodes, text runs, the document aggregate and visitors."""

from pdxdoc.ast.document import Document, Metadata
from pdxdoc.ast.nodes import (
    PLAIN,
    BlockNode,
    CodeBlock,
    Direction,
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
    node_runs,
    plain_text,
)
from pdxdoc.ast.visitors import NodeVisitor

__all__ = [
    "Document",
    "Metadata",
    "Node",
    "BlockNode",
    "Sequence",
    "Heading",
    "Paragraph",
    "List",
    "CodeBlock",
    "Image",
    "Divider",
    "PageBreak",
    "TextRun",
    "Direction",
    "Emphasis",
    "PLAIN",
    "NodeVisitor",
    "node_runs",
    "plain_text",
]
