#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/utils/shaping.py
"""Glyph shaping for raster and PDF backends.

HTML output leaves shaping to the browser. ReportLab and Pillow draw code
points one by one, so right-to-left text must first be reshaped into its
contextual presentation forms (``arabic-reshaper``) and put into display
order (``python-bidi``) before drawing.

"""

from __future__ import annotations

import logging

from pdxdoc.ast.nodes import Direction
from pdxdoc.bidi import has_strong_char, infer_direction, is_arabic_char
from pdxdoc.constants import DEPS_SHAPING
from pdxdoc.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)


@requires_dependencies("shaping", DEPS_SHAPING)
def display_text(text: str, direction: Direction) -> str:
    """Return ``text`` in the form a left-to-right glyph drawer should emit.

    Parameters
    ----------
    text : str
        Logical text of one visual run
    direction : Direction
        Resolved run direction; ``AUTO`` is inferred from ``text``

    Returns
    -------
    str
        Reshaped, visually ordered text for right-to-left runs; ``text``
        unchanged otherwise

    Examples
    --------
        >>> display_text("PDX", Direction.LTR)
        'PDX'

    """
    if direction is Direction.AUTO:
        direction = infer_direction(text)
    if direction is not Direction.RTL or not has_strong_char(text):
        return text

    import arabic_reshaper
    from bidi.algorithm import get_display

    shaped = arabic_reshaper.reshape(text) if any(is_arabic_char(ch) for ch in text) else text
    return get_display(shaped, base_dir="R")


__all__ = ["display_text"]
