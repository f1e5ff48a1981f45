#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/ast/visitors.py
"""Visitor base class for document tree traversal.

Every consumer of the tree (serializer, layout engine) subclasses
:class:`NodeVisitor`. All visit methods are abstract, so adding a node kind
makes every consumer that has not been updated fail at instantiation.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pdxdoc.ast.nodes import CodeBlock, Divider, Heading, Image, List, Node, PageBreak, Paragraph, Sequence


class NodeVisitor(ABC):
    """Abstract base class for node visitors.

    Examples
    --------
        >>> class BlockCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_sequence(self, node):
        ...         for child in node.children:
        ...             child.accept(self)
        ...     def generic_leaf(self, node):
        ...         self.count += 1
        ...     visit_heading = visit_paragraph = visit_list = generic_leaf
        ...     visit_code_block = visit_image = visit_divider = visit_page_break = generic_leaf

    """

    def visit(self, node: Node) -> Any:
        """Dispatch ``node`` to its visit method."""
        return node.accept(self)

    @abstractmethod
    def visit_sequence(self, node: Sequence) -> Any:
        """Visit a Sequence container."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""

    @abstractmethod
    def visit_divider(self, node: Divider) -> Any:
        """Visit a Divider node."""

    @abstractmethod
    def visit_page_break(self, node: PageBreak) -> Any:
        """Visit a PageBreak node."""
