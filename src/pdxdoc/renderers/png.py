#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/renderers/png.py
"""PNG export: rasterize the document onto a Pillow RGBA canvas.

The document is laid out continuously at canvas resolution (canvas width
minus margins) and drawn onto a sheet tall enough for the whole layout. The
sheet is then fitted to the canvas: scaled down uniformly when it is taller
and ``fit_to_canvas`` is set, otherwise clipped.

Fonts are loaded with Pillow's basic layout engine; right-to-left text is
shaped and reordered by :func:`~pdxdoc.utils.shaping.display_text` before it
is drawn, so Pillow must not reorder it a second time.

"""

from __future__ import annotations

import logging
import math
from io import BytesIO
from pathlib import Path
from typing import IO, Any, Union

from pdxdoc.ast.document import Document
from pdxdoc.ast.nodes import Direction
from pdxdoc.constants import (
    CODE_BACKGROUND,
    DEFAULT_CODE_PADDING,
    DEPS_PNG_RENDER,
    PLACEHOLDER_FILL,
    PLACEHOLDER_STROKE,
)
from pdxdoc.exceptions import UnsupportedImageError
from pdxdoc.layout.engine import LayoutEngine, LayoutResult
from pdxdoc.layout.primitives import ImageBlock, Rule, TextBlock
from pdxdoc.options.layout import LayoutOptions
from pdxdoc.options.png import PngRendererOptions
from pdxdoc.renderers.base import BaseRenderer
from pdxdoc.utils.decorators import debug_timer, requires_dependencies
from pdxdoc.utils.fonts import FontProvider, font_role
from pdxdoc.utils.shaping import display_text

logger = logging.getLogger(__name__)


class PillowFontSet:
    """Pillow fonts by role and size, loaded on demand.

    Roles without a font file fall back to the regular font, and to Pillow's
    built-in default font when no TrueType font exists at all.

    """

    def __init__(self, provider: FontProvider):
        self.provider = provider
        self._cache: dict[tuple[str, float], Any] = {}

    def get(
        self,
        size: float,
        direction: Direction = Direction.LTR,
        *,
        bold: bool = False,
        italic: bool = False,
        monospace: bool = False,
        text: str = "",
    ) -> Any:
        from PIL import ImageFont

        role = font_role(direction, bold=bold, italic=italic, monospace=monospace, text=text)
        size = max(round(size, 2), 1.0)
        key = (role, size)
        if key not in self._cache:
            source = self.provider.load(role) or self.provider.load("regular")
            if source is not None:
                font = ImageFont.truetype(source.stream(), size, layout_engine=ImageFont.Layout.BASIC)
            else:
                logger.debug("No TrueType font for %s; using Pillow default font", role)
                font = ImageFont.load_default(size)
            self._cache[key] = font
        return self._cache[key]


class PillowMeasurer:
    """Measure text with the Pillow fonts used for drawing."""

    def __init__(self, fonts: PillowFontSet):
        self.fonts = fonts

    def measure(
        self,
        text: str,
        font_size: float,
        *,
        bold: bool = False,
        italic: bool = False,
        monospace: bool = False,
        direction: Direction = Direction.LTR,
    ) -> float:
        font = self.fonts.get(font_size, direction, bold=bold, italic=italic, monospace=monospace, text=text)
        if direction is Direction.RTL:
            text = display_text(text, direction)
        return float(font.getlength(text))


class PngRenderer(BaseRenderer):
    """Render a document to a PNG image.

    Parameters
    ----------
    options : PngRendererOptions or None, default = None
        Canvas size, margin and background
    font_provider : FontProvider, optional
        Font lookup; built from ``options.font_dirs`` when omitted

    Examples
    --------
        >>> png_bytes = PngRenderer().render_to_bytes(doc)
        >>> png_bytes[:8]
        b'\\x89PNG\\r\\n\\x1a\\n'

    """

    format_name = "png"

    def __init__(self, options: PngRendererOptions | None = None, font_provider: FontProvider | None = None):
        BaseRenderer._validate_options_type(options, PngRendererOptions, "png")
        options = options or PngRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: PngRendererOptions = options
        self.font_provider = font_provider or FontProvider(options.font_dirs)

    def layout(self, doc: Document, fonts: PillowFontSet) -> LayoutResult:
        engine = LayoutEngine(
            doc.stylesheet,
            zoom=self.options.zoom,
            options=LayoutOptions(page_width=float(self.options.width - 2 * self.options.margin)),
            resources=doc.resources,
            measurer=PillowMeasurer(fonts),
        )
        return engine.run(doc.content)

    @requires_dependencies("png", DEPS_PNG_RENDER)
    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the document to PNG and write it to ``output``.

        Raises
        ------
        UnresolvedResourceError
            If an image is missing and ``fail_on_resource_errors`` is True
        ExportIOError
            If the output cannot be written

        """
        with debug_timer(logger, "PNG export"):
            self.resolve_images(doc)
            fonts = PillowFontSet(self.font_provider)
            result = self.layout(doc, fonts)
            image = self.rasterize(doc, result, fonts)
            buffer = BytesIO()
            image.save(buffer, format="PNG")
        self.write_output(buffer.getvalue(), output)

    def rasterize(self, doc: Document, result: LayoutResult, fonts: PillowFontSet) -> Any:
        """Draw a layout and fit it to the canvas; returns an RGBA image."""
        from PIL import Image, ImageDraw

        width, height, margin = self.options.width, self.options.height, self.options.margin
        sheet_height = max(height, math.ceil(result.total_height + 2 * margin))
        sheet = Image.new("RGBA", (width, sheet_height), self.options.background)
        draw = ImageDraw.Draw(sheet)

        for primitive in result.primitives:
            if isinstance(primitive, TextBlock):
                self._draw_text_block(draw, primitive, fonts)
            elif isinstance(primitive, ImageBlock):
                self._draw_image(sheet, draw, doc, primitive)
            elif isinstance(primitive, Rule):
                y = margin + primitive.position.y
                x = margin + primitive.position.x
                line_width = max(1, round(self.options.zoom))
                draw.line([(x, y), (x + primitive.width, y)], fill=primitive.color, width=line_width)

        if sheet_height == height:
            return sheet

        canvas = Image.new("RGBA", (width, height), self.options.background)
        if self.options.fit_to_canvas:
            scale = height / sheet_height
            scaled = sheet.resize((max(1, round(width * scale)), height), Image.Resampling.LANCZOS)
            canvas.alpha_composite(scaled, ((width - scaled.width) // 2, 0))
            logger.debug("Scaled %dpx layout by %.3f to fit the canvas", sheet_height, scale)
        else:
            canvas.alpha_composite(sheet.crop((0, 0, width, height)))
            logger.debug("Clipped %dpx layout to %dpx canvas", sheet_height, height)
        return canvas

    def _draw_text_block(self, draw: Any, block: TextBlock, fonts: PillowFontSet) -> None:
        margin = self.options.margin
        style = block.style
        left = margin + block.position.x
        top = margin + block.position.y

        if block.role == "code":
            padding = DEFAULT_CODE_PADDING * self.options.zoom
            draw.rectangle(
                [left - padding, top - padding, left + block.size.width + padding, top + block.size.height + padding],
                fill=CODE_BACKGROUND,
            )

        for line_number, line in enumerate(block.lines):
            baseline = top + line.y + line.baseline
            if line_number == 0 and block.marker is not None:
                font = fonts.get(style.font_size, bold=style.bold)
                marker_at = (left + block.marker.x, baseline)
                draw.text(marker_at, block.marker.text, font=font, fill=style.color, anchor="ls")
            for run in line.runs:
                font = fonts.get(
                    style.font_size,
                    run.direction,
                    bold=style.bold or run.emphasis.bold,
                    italic=run.emphasis.italic,
                    monospace=style.monospace,
                    text=run.text,
                )
                if run.direction is Direction.RTL:
                    text = display_text(run.text, run.direction)
                    draw.text((left + run.x + run.width, baseline), text, font=font, fill=style.color, anchor="rs")
                else:
                    draw.text((left + run.x, baseline), run.text, font=font, fill=style.color, anchor="ls")

    def _draw_image(self, sheet: Any, draw: Any, doc: Document, block: ImageBlock) -> None:
        from PIL import Image

        margin = self.options.margin
        x = round(margin + block.position.x)
        y = round(margin + block.position.y)
        size = (max(1, round(block.size.width)), max(1, round(block.size.height)))
        decoded = doc.resources.get(block.resource_key)
        if decoded is not None and decoded.image is not None and not block.placeholder:
            try:
                picture = decoded.image.convert("RGBA").resize(size, Image.Resampling.LANCZOS)
            except (OSError, ValueError) as e:
                if self.options.fail_on_resource_errors:
                    raise UnsupportedImageError(block.resource_key, backend="png", original_error=e) from e
                logger.warning("Cannot draw image %s (%s); drawing a placeholder", block.resource_key, e)
            else:
                sheet.alpha_composite(picture, (x, y))
                return
        draw.rectangle([x, y, x + size[0], y + size[1]], fill=PLACEHOLDER_FILL, outline=PLACEHOLDER_STROKE)


__all__ = ["PngRenderer", "PillowFontSet", "PillowMeasurer"]
