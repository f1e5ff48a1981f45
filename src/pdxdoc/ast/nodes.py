#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/ast/nodes.py
"""Node classes for the pdxdoc document tree.

A document body is a tree with a :class:`Sequence` at the root. Every other
node kind is a leaf block; text-bearing blocks hold lists of :class:`TextRun`.

Node Hierarchy
--------------
    - Sequence (the only container)
    - Heading, Paragraph, List, CodeBlock
    - Image, Divider, PageBreak

Nodes are plain dataclasses with structural equality and support the visitor
pattern through ``accept``.

"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator, Optional, Union

from pdxdoc.constants import MAX_HEADING_LEVEL, SOFT_BREAK_TEXT


class Direction(Enum):
    """Reading direction of a text run."""

    LTR = "ltr"
    RTL = "rtl"
    AUTO = "auto"

    @property
    def opposite(self) -> "Direction":
        if self is Direction.LTR:
            return Direction.RTL
        if self is Direction.RTL:
            return Direction.LTR
        return Direction.AUTO


@dataclass(frozen=True)
class Emphasis:
    """Inline emphasis flags shared by every character of a run."""

    bold: bool = False
    italic: bool = False

    @property
    def plain(self) -> bool:
        return not (self.bold or self.italic)


PLAIN = Emphasis()


@dataclass(frozen=True)
class TextRun:
    """A span of text sharing one direction, language and emphasis setting.

    Parameters
    ----------
    text : str
        Logical (storage order) text of the run
    direction : Direction, default = Direction.AUTO
        Direction hint. The markup parser stores the inferred direction here;
        ``AUTO`` runs are resolved during layout without being rewritten.
    language_hint : str or None, default = None
        BCP-47 style language tag (e.g. "ar")
    emphasis : Emphasis, default = Emphasis()
        Bold/italic flags

    """

    text: str
    direction: Direction = Direction.AUTO
    language_hint: Optional[str] = None
    emphasis: Emphasis = PLAIN

    @classmethod
    def soft_break(cls) -> "TextRun":
        """Return the marker run placed between merged paragraph lines."""
        return cls(SOFT_BREAK_TEXT, Direction.AUTO)

    @property
    def is_soft_break(self) -> bool:
        return self.text == SOFT_BREAK_TEXT

    @property
    def is_strong(self) -> bool:
        """True when the run holds at least one strongly directional character."""
        from pdxdoc.bidi import has_strong_char

        return has_strong_char(self.text)

    def with_text(self, text: str) -> "TextRun":
        """Return a copy holding ``text``, with direction and language re-inferred.

        Emphasis is kept. This is the only run operation that recomputes the
        direction; every other edit leaves the stored hint alone.
        """
        from pdxdoc.bidi import infer_direction, infer_language

        return replace(self, text=text, direction=infer_direction(text), language_hint=infer_language(text))

    def with_emphasis(self, bold: bool | None = None, italic: bool | None = None) -> "TextRun":
        return replace(
            self,
            emphasis=Emphasis(
                bold=self.emphasis.bold if bold is None else bold,
                italic=self.emphasis.italic if italic is None else italic,
            ),
        )


class Node(ABC):
    """Base class for all document nodes."""

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : NodeVisitor
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the matching visit method

        """
        ...


@dataclass
class Heading(Node):
    """Heading node (levels 1-6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    runs : list of TextRun, default = empty list
        Heading text

    """

    level: int
    runs: list[TextRun] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= MAX_HEADING_LEVEL:
            raise ValueError(f"Heading level must be 1-{MAX_HEADING_LEVEL}, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph of runs; merged source lines are separated by soft-break runs."""

    runs: list[TextRun] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_paragraph(self)


@dataclass
class List(Node):
    """Ordered or unordered list.

    Parameters
    ----------
    ordered : bool
        Numbered list when True, bulleted otherwise
    items : list of list of TextRun
        One run list per item

    """

    ordered: bool = False
    items: list[list[TextRun]] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list(self)


@dataclass
class CodeBlock(Node):
    """Verbatim code block with an optional language token."""

    language: Optional[str] = None
    text: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_code_block(self)


@dataclass
class Image(Node):
    """Block image reference.

    Parameters
    ----------
    path : str
        Resource key: a document-relative or absolute path
    alt_text : str, default = ""
        Alternative text, also used as the placeholder label
    width : float or None, default = None
        Explicit display width in layout units
    height : float or None, default = None
        Explicit display height in layout units

    """

    path: str
    alt_text: str = ""
    width: Optional[float] = None
    height: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and (value <= 0 or not math.isfinite(value)):
                raise ValueError(f"Image {name} must be a positive finite number, got {value}")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_image(self)


@dataclass
class Divider(Node):
    """Horizontal rule."""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_divider(self)


@dataclass
class PageBreak(Node):
    """Forced page boundary for paginated output."""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_page_break(self)


BlockNode = Union[Heading, Paragraph, List, CodeBlock, Image, Divider, PageBreak]


@dataclass
class Sequence(Node):
    """Ordered container of nodes; the document root is always a Sequence.

    Editing operations mutate the sequence in place. Inserting a sequence
    into itself or into one of its own descendants raises ValueError, so
    trees stay acyclic.

    """

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_sequence(self)

    def walk(self) -> Iterator[Node]:
        """Yield this sequence and every descendant in document order."""
        yield self
        for child in self.children:
            if isinstance(child, Sequence):
                yield from child.walk()
            else:
                yield child

    def blocks(self) -> Iterator[BlockNode]:
        """Yield leaf blocks in document order, flattening nested sequences."""
        for node in self.walk():
            if not isinstance(node, Sequence):
                yield node  # type: ignore[misc]

    def block_count(self) -> int:
        return sum(1 for _ in self.blocks())

    def _check_insertable(self, node: Node) -> None:
        if not isinstance(node, Node):
            raise TypeError(f"Expected a Node, got {type(node).__name__}")
        if isinstance(node, Sequence) and any(n is self for n in node.walk()):
            raise ValueError("Cannot insert a sequence into itself or its descendants")

    def append(self, node: Node) -> None:
        self._check_insertable(node)
        self.children.append(node)

    def insert(self, index: int, node: Node) -> None:
        """Insert ``node`` before position ``index``."""
        self._check_insertable(node)
        self.children.insert(index, node)

    def remove(self, index: int) -> Node:
        """Remove and return the child at ``index``."""
        return self.children.pop(index)

    def replace(self, index: int, node: Node) -> Node:
        """Replace the child at ``index`` and return the previous node."""
        self._check_insertable(node)
        previous = self.children[index]
        self.children[index] = node
        return previous

    def __len__(self) -> int:
        return len(self.children)


def node_runs(node: Node) -> list[list[TextRun]]:
    """Return the run lists held by a text-bearing node (one per list item)."""
    if isinstance(node, (Heading, Paragraph)):
        return [node.runs]
    if isinstance(node, List):
        return node.items
    return []


def plain_text(runs: list[TextRun]) -> str:
    """Concatenate run text, rendering soft breaks as newlines."""
    return "".join(run.text for run in runs)


__all__ = [
    "Direction",
    "Emphasis",
    "PLAIN",
    "TextRun",
    "Node",
    "Heading",
    "Paragraph",
    "List",
    "CodeBlock",
    "Image",
    "Divider",
    "PageBreak",
    "Sequence",
    "BlockNode",
    "node_runs",
    "plain_text",
]
