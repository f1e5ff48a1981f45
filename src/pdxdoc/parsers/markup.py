#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/parsers/markup.py
r"""Markup text to node tree parser.

The markup is line oriented. A lexer classifies every physical line, then the
parser groups tokens into blocks. Parsing is total: malformed constructs are
demoted to paragraphs and recorded as :class:`ParseDegradation` entries,
never raised.

Block rules, earliest wins
--------------------------
1. ``#`` .. ``######`` followed by whitespace (or nothing) -> Heading
2. ``-`` / ``•`` + space -> unordered item; ``12.`` + space -> ordered item
3. a line starting with three or more backticks opens a fenced code block
4. ``![alt](path)`` with optional ``{width=W height=H}`` -> Image
5. ``---`` (three or more dashes) -> Divider
6. ``===`` (three or more equals signs) -> PageBreak
7. anything else -> Paragraph text; consecutive lines merge with soft breaks

Inline syntax
-------------
``*italic*``, ``**bold**`` and ``***bold italic***``; markers toggle state
so ``**a***b*`` is a bold "a" followed by an italic "b". A backslash escapes
any ASCII punctuation character (and ``•``).

"""

from __future__ import annotations

import logging
import math
import re
import string
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Literal, Optional

from pdxdoc.ast.nodes import (
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
from pdxdoc.bidi import make_runs
from pdxdoc.constants import MAX_HEADING_LEVEL, MIN_FENCE_LENGTH
from pdxdoc.exceptions import InvalidOptionsError
from pdxdoc.options.markup import MarkupParserOptions
from pdxdoc.utils.io_utils import InputSource, read_text

logger = logging.getLogger(__name__)

ESCAPABLE = frozenset(string.punctuation) | {"•"}

DegradationKind = Literal["degraded_line", "fence_unterminated", "unbalanced_emphasis"]


@dataclass(frozen=True)
class ParseDegradation:
    """A non-fatal parse event.

    Parameters
    ----------
    kind : {"degraded_line", "fence_unterminated", "unbalanced_emphasis"}
    line_number : int
        1-based source line
    message : str

    """

    kind: DegradationKind
    line_number: int
    message: str


class TokenType(Enum):
    """Line classes produced by the lexer."""

    HEADING = auto()
    UNORDERED_ITEM = auto()
    ORDERED_ITEM = auto()
    FENCE_OPEN = auto()
    CODE_LINE = auto()
    FENCE_CLOSE = auto()
    IMAGE = auto()
    DIVIDER = auto()
    PAGE_BREAK = auto()
    TEXT = auto()
    BLANK = auto()
    EOF = auto()


@dataclass
class Token:
    """A classified source line.

    Parameters
    ----------
    type : TokenType
    content : str
        Line payload (heading text, item text, raw code line, ...)
    line_num : int
        1-based line number
    metadata : dict
        Extra fields (heading level, fence length, image attributes)

    """

    type: TokenType
    content: str
    line_num: int
    metadata: dict[str, Any] = field(default_factory=dict)


HEADING_PATTERN = re.compile(r"^(#{1,%d})(?:\s+(.*))?$" % MAX_HEADING_LEVEL)
UNORDERED_PATTERN = re.compile(r"^([-•])(?:\s+(.*))?$")
ORDERED_PATTERN = re.compile(r"^(\d+)\.(?:\s+(.*))?$")
FENCE_PATTERN = re.compile(r"^(`{%d,})(.*)$" % MIN_FENCE_LENGTH)
IMAGE_PATTERN = re.compile(r"^!\[(?P<alt>[^\]]*)\]\((?P<path>[^()]*)\)(?:\{(?P<attrs>[^{}]*)\})?$")
IMAGE_ATTR_PATTERN = re.compile(r"^(width|height)=(\d+(?:\.\d+)?)$")
DIVIDER_PATTERN = re.compile(r"^-{3,}$")
PAGE_BREAK_PATTERN = re.compile(r"^={3,}$")


def split_lines(text: str) -> list[str]:
    """Split on LF, CRLF or CR only, so code content keeps other separators."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_image_attributes(attrs: str) -> Optional[dict[str, float]]:
    """Parse ``width=W height=H`` (space or comma separated); None if malformed."""
    result: dict[str, float] = {}
    for part in re.split(r"[\s,]+", attrs.strip()):
        if not part:
            continue
        match = IMAGE_ATTR_PATTERN.match(part)
        if not match or match.group(1) in result:
            return None
        value = float(match.group(2))
        if value <= 0 or not math.isfinite(value):
            return None
        result[match.group(1)] = value
    return result


def classify_line(stripped: str) -> tuple[TokenType, str, dict[str, Any]]:
    """Classify one stripped, non-blank line outside a fence.

    A line starting with ``![`` that fails the image grammar is TEXT with
    ``metadata["degraded"]`` set.
    """
    match = HEADING_PATTERN.match(stripped)
    if match:
        return TokenType.HEADING, (match.group(2) or "").strip(), {"level": len(match.group(1))}

    match = UNORDERED_PATTERN.match(stripped)
    if match:
        return TokenType.UNORDERED_ITEM, match.group(2) or "", {"marker": match.group(1)}

    match = ORDERED_PATTERN.match(stripped)
    if match:
        return TokenType.ORDERED_ITEM, match.group(2) or "", {"number": int(match.group(1))}

    match = FENCE_PATTERN.match(stripped)
    if match:
        info = match.group(2).strip()
        return TokenType.FENCE_OPEN, info, {"fence_length": len(match.group(1))}

    if stripped.startswith("!["):
        match = IMAGE_PATTERN.match(stripped)
        if match and match.group("path").strip():
            attrs = parse_image_attributes(match.group("attrs")) if match.group("attrs") is not None else {}
            if attrs is not None:
                return (
                    TokenType.IMAGE,
                    match.group("path"),
                    {"alt": match.group("alt"), "width": attrs.get("width"), "height": attrs.get("height")},
                )
        return TokenType.TEXT, stripped, {"degraded": "malformed image syntax"}

    if DIVIDER_PATTERN.match(stripped):
        return TokenType.DIVIDER, stripped, {}

    if PAGE_BREAK_PATTERN.match(stripped):
        return TokenType.PAGE_BREAK, stripped, {}

    return TokenType.TEXT, stripped, {}


def is_closing_fence(line: str, fence_length: int) -> bool:
    stripped = line.strip()
    return len(stripped) >= fence_length and set(stripped) == {"`"}


class MarkupLexer:
    """Tokenizer for markup text.

    Parameters
    ----------
    content : str
        Markup text to tokenize

    """

    def __init__(self, content: str):
        """Initialize the lexer with content."""
        self.lines = split_lines(content)
        self.tokens: list[Token] = []
        self._fence_length: Optional[int] = None

    def tokenize(self) -> list[Token]:
        """Tokenize the content into a list of tokens ending with EOF."""
        for index, line in enumerate(self.lines):
            self.tokens.append(self._tokenize_line(line, index + 1))
        self.tokens.append(Token(TokenType.EOF, "", len(self.lines) + 1))
        return self.tokens

    def _tokenize_line(self, line: str, line_num: int) -> Token:
        if self._fence_length is not None:
            if is_closing_fence(line, self._fence_length):
                self._fence_length = None
                return Token(TokenType.FENCE_CLOSE, line.strip(), line_num)
            return Token(TokenType.CODE_LINE, line, line_num)

        stripped = line.strip()
        if not stripped:
            return Token(TokenType.BLANK, "", line_num)

        token_type, content, metadata = classify_line(stripped)
        if token_type is TokenType.FENCE_OPEN:
            self._fence_length = metadata["fence_length"]
        return Token(token_type, content, line_num, metadata)


def _scan_inline(text: str) -> Optional[list[tuple[str, bool, bool]]]:
    """Split a line into (text, bold, italic) segments.

    Returns None when the emphasis markers do not balance, or when a run of
    more than three asterisks appears; callers then treat the line literally.
    """
    segments: list[tuple[str, bool, bool]] = []
    buffer: list[str] = []
    bold = italic = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and text[i + 1] in ESCAPABLE:
            buffer.append(text[i + 1])
            i += 2
            continue
        if ch == "*":
            j = i
            while j < len(text) and text[j] == "*":
                j += 1
            count = j - i
            if count > 3:
                return None
            if buffer:
                segments.append(("".join(buffer), bold, italic))
                buffer = []
            if count in (2, 3):
                bold = not bold
            if count in (1, 3):
                italic = not italic
            i = j
            continue
        buffer.append(ch)
        i += 1
    if bold or italic:
        return None
    if buffer:
        segments.append(("".join(buffer), bold, italic))
    return segments


def unescape(text: str) -> str:
    """Remove backslash escapes without interpreting emphasis."""
    return re.sub(r"\\([%s])" % re.escape("".join(sorted(ESCAPABLE))), r"\1", text)


def _merge_runs(runs: list[TextRun]) -> list[TextRun]:
    merged: list[TextRun] = []
    for run in runs:
        if not run.text:
            continue
        if merged:
            last = merged[-1]
            if (last.direction, last.language_hint, last.emphasis) == (run.direction, run.language_hint, run.emphasis):
                merged[-1] = TextRun(last.text + run.text, last.direction, last.language_hint, last.emphasis)
                continue
        merged.append(run)
    return merged


class MarkupParser:
    r"""Convert markup text to a :class:`Sequence` tree.

    Parameters
    ----------
    options : MarkupParserOptions or None, default None
        Parser configuration

    Attributes
    ----------
    degradations : list of ParseDegradation
        Non-fatal events recorded by the most recent :meth:`parse` call

    Examples
    --------
        >>> parser = MarkupParser()
        >>> tree = parser.parse("### \n- item\n```\nunterminated")
        >>> [type(n).__name__ for n in tree.children]
        ['Heading', 'List', 'CodeBlock']
        >>> parser.degradations[0].kind
        'fence_unterminated'

    """

    def __init__(self, options: MarkupParserOptions | None = None):
        if options is not None and not isinstance(options, MarkupParserOptions):
            raise InvalidOptionsError("markup parser", MarkupParserOptions, type(options))
        self.options = options or MarkupParserOptions()
        self.degradations: list[ParseDegradation] = []
        self.tokens: list[Token] = []
        self.current_token_index = 0

    def parse(self, text: str) -> Sequence:
        """Parse markup text into a node tree.

        Parameters
        ----------
        text : str
            Markup text

        Returns
        -------
        Sequence
            Root node of the parsed tree

        """
        self.degradations = []
        self.tokens = MarkupLexer(text).tokenize()
        self.current_token_index = 0

        children: list[Node] = []
        while self._current_token().type is not TokenType.EOF:
            node = self._parse_block()
            if node is not None:
                children.append(node)

        logger.debug("Parsed %d blocks with %d degradations", len(children), len(self.degradations))
        return Sequence(children=children)

    def parse_file(self, source: InputSource) -> Sequence:
        """Parse markup read from a path, bytes or stream (UTF-8)."""
        return self.parse(read_text(source))

    def _current_token(self) -> Token:
        if self.current_token_index < len(self.tokens):
            return self.tokens[self.current_token_index]
        return self.tokens[-1]

    def _advance(self) -> Token:
        token = self._current_token()
        if token.type is not TokenType.EOF:
            self.current_token_index += 1
        return token

    def _record(self, kind: DegradationKind, line_number: int, message: str) -> None:
        self.degradations.append(ParseDegradation(kind, line_number, message))
        if self.options.log_degradations:
            logger.debug("Line %d: %s (%s)", line_number, message, kind)

    def _parse_block(self) -> Optional[Node]:
        token = self._current_token()
        token_type = token.type

        if token_type is TokenType.BLANK:
            self._advance()
            return None
        if token_type is TokenType.HEADING:
            self._advance()
            return Heading(level=token.metadata["level"], runs=self._parse_inline(token.content, token.line_num))
        if token_type in (TokenType.UNORDERED_ITEM, TokenType.ORDERED_ITEM):
            return self._parse_list()
        if token_type is TokenType.FENCE_OPEN:
            return self._parse_code_block()
        if token_type is TokenType.IMAGE:
            self._advance()
            return Image(
                path=token.content,
                alt_text=token.metadata["alt"],
                width=token.metadata["width"],
                height=token.metadata["height"],
            )
        if token_type is TokenType.DIVIDER:
            self._advance()
            return Divider()
        if token_type is TokenType.PAGE_BREAK:
            self._advance()
            return PageBreak()
        if token_type is TokenType.TEXT:
            return self._parse_paragraph()

        # Stray FENCE_CLOSE/CODE_LINE cannot occur outside a fence; keep the text.
        self._advance()
        self._record("degraded_line", token.line_num, f"unexpected {token_type.name.lower()}")
        return Paragraph(runs=self._parse_inline(token.content.strip(), token.line_num))

    def _parse_list(self) -> List:
        list_type = self._current_token().type
        items: list[list[TextRun]] = []
        while self._current_token().type is list_type:
            token = self._advance()
            items.append(self._parse_inline(token.content.strip(), token.line_num))
        return List(ordered=list_type is TokenType.ORDERED_ITEM, items=items)

    def _parse_code_block(self) -> CodeBlock:
        opening = self._advance()
        lines: list[str] = []
        while True:
            token = self._current_token()
            if token.type is TokenType.CODE_LINE:
                lines.append(token.content)
                self._advance()
                continue
            if token.type is TokenType.FENCE_CLOSE:
                self._advance()
            else:
                self._record("fence_unterminated", opening.line_num, "code fence closed at end of input")
            break
        return CodeBlock(language=opening.content or None, text="\n".join(lines))

    def _parse_paragraph(self) -> Paragraph:
        runs: list[TextRun] = []
        while self._current_token().type is TokenType.TEXT:
            token = self._advance()
            if "degraded" in token.metadata:
                self._record("degraded_line", token.line_num, token.metadata["degraded"])
            if runs:
                runs.append(TextRun.soft_break())
            runs.extend(self._parse_inline(token.content, token.line_num))
        return Paragraph(runs=runs)

    def _parse_inline(self, text: str, line_number: int) -> list[TextRun]:
        """Build direction-tagged runs from one line of inline markup."""
        segments = _scan_inline(text) if self.options.parse_emphasis else None
        if segments is None:
            if self.options.parse_emphasis:
                self._record("unbalanced_emphasis", line_number, "emphasis markers taken literally")
            segments = [(unescape(text), False, False)]

        runs: list[TextRun] = []
        for segment_text, bold, italic in segments:
            runs.extend(make_runs(segment_text, Emphasis(bold=bold, italic=italic)))
        return _merge_runs(runs)


def parse(text: str, options: MarkupParserOptions | None = None) -> Sequence:
    """Parse markup text into a :class:`Sequence` tree.

    Examples
    --------
        >>> tree = parse("# Title\\n\\nSome *text*")
        >>> tree.children[0].level
        1

    """
    return MarkupParser(options).parse(text)


__all__ = [
    "ParseDegradation",
    "TokenType",
    "Token",
    "MarkupLexer",
    "MarkupParser",
    "classify_line",
    "parse",
]
