#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/utils/html_utils.py
"""HTML-related utility helpers."""

from __future__ import annotations

from html import escape as _html_escape
from typing import Mapping, Optional


def escape_html(text: str, *, enabled: bool = True) -> str:
    """Escape HTML special characters when enabled."""
    if not enabled:
        return text
    return _html_escape(text)


def format_attributes(attributes: Mapping[str, Optional[str]]) -> str:
    """Render ``name="value"`` pairs, skipping None values.

    Examples
    --------
        >>> format_attributes({"dir": "rtl", "lang": None, "alt": 'a "b"'})
        ' dir="rtl" alt="a &quot;b&quot;"'

    """
    return "".join(f' {name}="{escape_html(value)}"' for name, value in attributes.items() if value is not None)


def css_declarations(properties: Mapping[str, object]) -> str:
    """Join CSS properties into an inline ``style`` value."""
    return ";".join(f"{name}:{value}" for name, value in properties.items())


def format_px(value: float) -> str:
    """Format a length in CSS pixels without trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}px" if text != "0" else "0"
