#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pdxdoc/parsers/__init__.py
"""Parsers that build node trees from text."""

from pdxdoc.parsers.markup import MarkupLexer, MarkupParser, ParseDegradation, classify_line, parse

__all__ = ["MarkupLexer", "MarkupParser", "ParseDegradation", "classify_line", "parse"]
