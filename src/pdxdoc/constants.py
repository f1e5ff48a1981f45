#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/constants.py
"""Constants and default values used across pdxdoc.

This module centralizes magic numbers, defaults and dependency declarations so
the options classes, layout engine and exporters share a single source of
truth.
"""

from __future__ import annotations

from typing import Literal

# Document container
PDX_FORMAT_VERSION = 1
DEFAULT_TITLE = "Untitled Document"
DEFAULT_LANGUAGE = "en"
DEFAULT_THEME = "default"
DEFAULT_CREATOR = "pdxdoc"

# Markup syntax
MAX_HEADING_LEVEL = 6
UNORDERED_MARKERS = ("-", "\u2022")
FENCE_CHAR = "`"
MIN_FENCE_LENGTH = 3
SOFT_BREAK_TEXT = "\n"

# Type aliases
Alignment = Literal["start", "end", "center", "justify"]
FontWeight = Literal["normal", "bold"]
PageSize = Literal["a4", "letter", "legal"]
ExportFormat = Literal["html", "pdf", "png", "markup", "json"]
PrimitiveRole = Literal["heading", "paragraph", "list_item", "code"]

# Page geometry in PostScript points (1/72 inch)
PAGE_SIZES: dict[str, tuple[float, float]] = {
    "a4": (595.2756, 841.8898),
    "letter": (612.0, 792.0),
    "legal": (612.0, 1008.0),
}
DEFAULT_PAGE_SIZE: PageSize = "a4"
DEFAULT_PDF_MARGIN = 56.69  # 20mm
DEFAULT_PDF_PAGE_NUMBER_SIZE = 9.0

# Layout defaults (layout units: pt for PDF, px for HTML and PNG)
DEFAULT_PAGE_WIDTH = PAGE_SIZES["a4"][0] - 2 * DEFAULT_PDF_MARGIN
DEFAULT_PLACEHOLDER_WIDTH = 200.0
DEFAULT_PLACEHOLDER_HEIGHT = 150.0
DEFAULT_LIST_INDENT = 24.0
DEFAULT_MARKER_GAP = 6.0
DEFAULT_BLOCK_GAP = 0.0
DEFAULT_RULE_SPACING = 10.0
DEFAULT_PAGE_BREAK_SPACING = 20.0
DEFAULT_CODE_PADDING = 8.0

# PNG defaults
DEFAULT_PNG_WIDTH = 1200
DEFAULT_PNG_HEIGHT = 1600
DEFAULT_PNG_MARGIN = 48
DEFAULT_PNG_BACKGROUND = (255, 255, 255, 255)

# HTML defaults
DEFAULT_HTML_CONTENT_WIDTH = 800.0
DEFAULT_HTML_FONT_FAMILY = "system-ui, -apple-system, 'Segoe UI', 'Noto Sans Arabic', 'Noto Sans', sans-serif"

# Colors
PLACEHOLDER_FILL = "#eeeeee"
PLACEHOLDER_STROKE = "#999999"
RULE_COLOR = "#dddddd"
CODE_BACKGROUND = "#f4f4f4"

# Font discovery
FONT_PATH_ENV_VAR = "PDXDOC_FONT_PATH"
LATIN_FONT_CANDIDATES = {
    "regular": ("Vera.ttf", "DejaVuSans.ttf", "NotoSans-Regular.ttf", "LiberationSans-Regular.ttf", "Arial.ttf"),
    "bold": ("VeraBd.ttf", "DejaVuSans-Bold.ttf", "NotoSans-Bold.ttf", "LiberationSans-Bold.ttf", "Arial Bold.ttf"),
    "italic": (
        "VeraIt.ttf",
        "DejaVuSans-Oblique.ttf",
        "NotoSans-Italic.ttf",
        "LiberationSans-Italic.ttf",
        "Arial Italic.ttf",
    ),
    "bold_italic": (
        "VeraBI.ttf",
        "DejaVuSans-BoldOblique.ttf",
        "NotoSans-BoldItalic.ttf",
        "LiberationSans-BoldItalic.ttf",
        "Arial Bold Italic.ttf",
    ),
    "mono": ("DejaVuSansMono.ttf", "LiberationMono-Regular.ttf", "NotoSansMono-Regular.ttf", "Courier New.ttf"),
}
RTL_FONT_CANDIDATES = (
    "NotoSansArabic-Regular.ttf",
    "NotoNaskhArabic-Regular.ttf",
    "Amiri-Regular.ttf",
    "DejaVuSans.ttf",
    "FreeSerif.ttf",
    "Tahoma.ttf",
    "Arial.ttf",
)
SYSTEM_FONT_DIRS = (
    "/usr/share/fonts",
    "/usr/local/share/fonts",
    "~/.fonts",
    "~/.local/share/fonts",
    "/Library/Fonts",
    "/System/Library/Fonts",
    "C:/Windows/Fonts",
)

# Dependency declarations: (install_name, import_name, version_spec)
DEPS_SHAPING = [
    ("arabic-reshaper", "arabic_reshaper", ""),
    ("python-bidi", "bidi", ""),
]
DEPS_PDF_RENDER = [("reportlab", "reportlab", ">=4.0.0")] + DEPS_SHAPING
DEPS_PNG_RENDER = [("Pillow", "PIL", ">=10.1.0")] + DEPS_SHAPING
DEPS_IMAGE_DECODE = [("Pillow", "PIL", ">=10.1.0")]
