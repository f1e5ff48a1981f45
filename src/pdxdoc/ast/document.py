#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/ast/document.py
"""Document aggregate: metadata, style sheet, content tree and resources."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from pdxdoc.ast.nodes import Heading, List, Node, Paragraph, Sequence, TextRun
from pdxdoc.constants import DEFAULT_LANGUAGE, DEFAULT_TITLE, PDX_FORMAT_VERSION
from pdxdoc.resources import Resources
from pdxdoc.styles import StyleSheet

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


@dataclass
class Metadata:
    """Document metadata.

    Parameters
    ----------
    title : str, default "Untitled Document"
    author : str, default ""
    language : str, default "en"
        Primary language tag of the document
    created, modified : str
        ISO-8601 timestamps; both default to the current UTC time
    keywords : list of str

    """

    title: str = DEFAULT_TITLE
    author: str = ""
    language: str = DEFAULT_LANGUAGE
    created: str = field(default_factory=_now)
    modified: str = field(default_factory=_now)
    keywords: list[str] = field(default_factory=list)

    def touch(self) -> None:
        """Update the modification timestamp."""
        self.modified = _now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "author": self.author,
            "language": self.language,
            "created": self.created,
            "modified": self.modified,
            "keywords": list(self.keywords),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metadata":
        defaults = cls()
        keywords = data.get("keywords") or []
        if not isinstance(keywords, list):
            raise ValueError("'keywords' must be a list")
        return cls(
            title=str(data.get("title", defaults.title)),
            author=str(data.get("author", defaults.author)),
            language=str(data.get("language", data.get("lang", defaults.language))),
            created=str(data.get("created", defaults.created)),
            modified=str(data.get("modified", defaults.modified)),
            keywords=[str(k) for k in keywords],
        )


@dataclass
class Document:
    """Root aggregate of an editing session.

    Parameters
    ----------
    metadata : Metadata
    stylesheet : StyleSheet
    content : Sequence
        Root of the node tree
    version : int, default 1
        Container format version
    resources : Resources
        Decoded image table; excluded from equality

    Examples
    --------
        >>> from pdxdoc import parse
        >>> doc = Document(content=parse("# Title\\n\\nBody text"))
        >>> _ = doc.edit_run(1, 0, "Edited")
        >>> doc.content.children[1].runs[0].text
        'Edited'

    """

    metadata: Metadata = field(default_factory=Metadata)
    stylesheet: StyleSheet = field(default_factory=StyleSheet.default)
    content: Sequence = field(default_factory=Sequence)
    version: int = PDX_FORMAT_VERSION
    resources: Resources = field(default_factory=Resources, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.content, Sequence):
            raise TypeError(f"Document content must be a Sequence, got {type(self.content).__name__}")

    @property
    def title(self) -> str:
        return self.metadata.title

    def insert(self, index: int, node: Node) -> None:
        """Insert a node into the root sequence."""
        self.content.insert(index, node)
        self.metadata.touch()

    def remove(self, index: int) -> Node:
        removed = self.content.remove(index)
        self.metadata.touch()
        return removed

    def replace(self, index: int, node: Node) -> Node:
        previous = self.content.replace(index, node)
        self.metadata.touch()
        return previous

    def edit_run(self, block_index: int, run_index: int, text: str, item_index: Optional[int] = None) -> TextRun:
        """Replace the text of one run and re-infer its direction.

        Only the edited run is re-inferred; directions stored on every other
        run are left as they are.

        Parameters
        ----------
        block_index : int
            Index of a Heading, Paragraph or List in the root sequence
        run_index : int
            Index of the run within the block (or list item)
        text : str
            New run text
        item_index : int, optional
            Item index, required for List blocks

        Returns
        -------
        TextRun
            The new run

        Raises
        ------
        TypeError
            If the block holds no runs
        IndexError
            If an index is out of range

        """
        block = self.content.children[block_index]
        if isinstance(block, (Heading, Paragraph)):
            runs = block.runs
        elif isinstance(block, List):
            if item_index is None:
                raise TypeError("item_index is required when editing a List")
            runs = block.items[item_index]
        else:
            raise TypeError(f"{type(block).__name__} has no text runs")

        old = runs[run_index]
        new = old.with_text(text)
        runs[run_index] = new
        self.metadata.touch()
        logger.debug("Edited run %d of block %d (%s -> %s)", run_index, block_index, old.direction, new.direction)
        return new


__all__ = ["Metadata", "Document"]
