#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for PNG export."""

from dataclasses import dataclass, field

from pdxdoc.constants import DEFAULT_PNG_BACKGROUND, DEFAULT_PNG_HEIGHT, DEFAULT_PNG_MARGIN, DEFAULT_PNG_WIDTH
from pdxdoc.options.base import BaseRendererOptions


# src/pdxdoc/options/png.py
@dataclass(frozen=True)
class PngRendererOptions(BaseRendererOptions):
    """Options for rasterizing a document to a PNG image.

    Parameters
    ----------
    width, height : int, default 1200 x 1600
        Canvas size in pixels
    margin : int, default 48
        Margin around the content in pixels
    background : tuple of int, default (255, 255, 255, 255)
        RGBA background; use alpha 0 for a transparent canvas
    fit_to_canvas : bool, default True
        Scale the layout down uniformly when it is taller than the canvas.
        When False, overflowing content is clipped.
    font_dirs : tuple of str, default ()
        Extra directories searched for TrueType fonts
    zoom : float, default 1.0
        Layout zoom factor

    """

    width: int = field(default=DEFAULT_PNG_WIDTH, metadata={"help": "Canvas width in pixels", "importance": "core"})
    height: int = field(default=DEFAULT_PNG_HEIGHT, metadata={"help": "Canvas height in pixels", "importance": "core"})
    margin: int = field(default=DEFAULT_PNG_MARGIN, metadata={"help": "Canvas margin in pixels", "importance": "core"})
    background: tuple[int, int, int, int] = field(
        default=DEFAULT_PNG_BACKGROUND,
        metadata={"help": "Background color as RGBA", "importance": "advanced"},
    )
    fit_to_canvas: bool = field(
        default=True,
        metadata={"help": "Scale tall layouts down to fit the canvas height", "importance": "core"},
    )
    font_dirs: tuple[str, ...] = field(
        default=(),
        metadata={"help": "Additional TrueType font directories", "importance": "advanced"},
    )
    zoom: float = field(
        default=1.0,
        metadata={"help": "Zoom factor for font sizes and spacing", "type": float, "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"canvas size must be positive, got {self.width}x{self.height}")
        if self.margin < 0 or 2 * self.margin >= min(self.width, self.height):
            raise ValueError(f"margin {self.margin} does not fit a {self.width}x{self.height} canvas")
        if len(self.background) != 4 or any(not 0 <= c <= 255 for c in self.background):
            raise ValueError(f"background must be an RGBA tuple of 0-255 values, got {self.background}")
        if self.zoom <= 0:
            raise ValueError(f"zoom must be positive, got {self.zoom}")
