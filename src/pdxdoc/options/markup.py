#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the markup parser."""

from dataclasses import dataclass, field

from pdxdoc.options.base import BaseParserOptions


# src/pdxdoc/options/markup.py
@dataclass(frozen=True)
class MarkupParserOptions(BaseParserOptions):
    """Options for parsing markup text into a node tree.

    Parameters
    ----------
    parse_emphasis : bool, default True
        Interpret ``*``/``**``/``***`` emphasis markers. When False every
        asterisk is literal text.
    log_degradations : bool, default True
        Log each degraded line at DEBUG level as it is recorded

    """

    parse_emphasis: bool = field(
        default=True,
        metadata={"help": "Interpret *italic*, **bold** and ***both*** markers", "importance": "core"},
    )
    log_degradations: bool = field(
        default=True,
        metadata={"help": "Log degraded lines at DEBUG level", "importance": "advanced"},
    )
