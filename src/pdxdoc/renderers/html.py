#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/renderers/html.py
"""HTML export.

The document is laid out continuously against ``content_width`` and each
primitive is mapped to an element: headings to ``h1``-``h6``, paragraphs to
``p``, list item blocks to ``li`` inside ``ul``/``ol`` (one per list), code to
``pre > code``, images to ``img``, rules to ``hr`` and forced breaks to a
page-break ``div``.

Text is written in logical order; the browser performs bidi reordering and
shaping from the ``dir`` attributes. Every text element carries the base
direction of its block, and runs whose direction differs from it are wrapped
in ``<span dir=... lang=...>``.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

from pdxdoc.ast.document import Document
from pdxdoc.ast.nodes import Direction, TextRun
from pdxdoc.bidi import effective_directions
from pdxdoc.constants import CODE_BACKGROUND, DEFAULT_CODE_PADDING, PLACEHOLDER_FILL, PLACEHOLDER_STROKE
from pdxdoc.layout.engine import LayoutEngine, LayoutResult
from pdxdoc.layout.primitives import Break, ImageBlock, Rule, TextBlock
from pdxdoc.options.html import HtmlRendererOptions
from pdxdoc.options.layout import LayoutOptions
from pdxdoc.renderers.base import BaseRenderer
from pdxdoc.styles import StyleRule
from pdxdoc.utils.decorators import debug_timer
from pdxdoc.utils.html_utils import css_declarations, escape_html, format_attributes, format_px

logger = logging.getLogger(__name__)


class HtmlRenderer(BaseRenderer):
    """Render a document to HTML.

    Parameters
    ----------
    options : HtmlRendererOptions or None, default = None
        HTML formatting options

    Examples
    --------
        >>> from pdxdoc.sample import create_sample_document
        >>> html = HtmlRenderer().render_to_string(create_sample_document())
        >>> html.startswith("<!DOCTYPE html>")
        True

    """

    format_name = "html"

    def __init__(self, options: HtmlRendererOptions | None = None):
        """Initialize the HTML renderer with options."""
        BaseRenderer._validate_options_type(options, HtmlRendererOptions, "html")
        options = options or HtmlRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: HtmlRendererOptions = options

    def layout(self, doc: Document) -> LayoutResult:
        """Lay out the document continuously at the configured content width."""
        engine = LayoutEngine(
            doc.stylesheet,
            zoom=self.options.zoom,
            options=LayoutOptions(page_width=self.options.content_width),
            resources=doc.resources,
        )
        return engine.run(doc.content)

    def render_to_string(self, doc: Document) -> str:
        """Render a document to an HTML string.

        Parameters
        ----------
        doc : Document
            Document to render

        Returns
        -------
        str
            Complete HTML document, or the body fragment when
            ``standalone=False``

        """
        with debug_timer(logger, "HTML export"):
            result = self.layout(doc)
            body = self._render_primitives(result)
            if self.options.standalone:
                return self._wrap_in_document(doc, body)
            return body

    def render(self, doc: Document, output: Union[str, Path, IO[bytes], IO[str]]) -> None:
        """Render the document to HTML and write it to ``output``."""
        self.write_text_output(self.render_to_string(doc), output)

    def _wrap_in_document(self, doc: Document, content: str) -> str:
        language = self.options.language or doc.metadata.language
        parts = [
            "<!DOCTYPE html>",
            f"<html{format_attributes({'lang': language})}>",
            "<head>",
            '<meta charset="UTF-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            f"<title>{escape_html(doc.metadata.title)}</title>",
        ]
        if doc.metadata.author:
            parts.append(f"<meta{format_attributes({'name': 'author', 'content': doc.metadata.author})}>")
        if doc.metadata.keywords:
            keywords = ", ".join(doc.metadata.keywords)
            parts.append(f"<meta{format_attributes({'name': 'keywords', 'content': keywords})}>")
        parts.append(f"<meta{format_attributes({'name': 'generator', 'content': self.options.creator})}>")
        if self.options.include_default_css:
            parts.append("<style>")
            parts.append(self._generate_default_css())
            parts.append("</style>")
        parts.append("</head>")
        parts.append("<body>")
        parts.append("<main>")
        parts.append(content)
        parts.append("</main>")
        parts.append("</body>")
        parts.append("</html>")
        return "\n".join(parts)

    def _generate_default_css(self) -> str:
        return f"""
body {{
    font-family: {self.options.font_family};
    max-width: {format_px(self.options.content_width)};
    margin: 0 auto;
    padding: 2rem;
}}
h1, h2, h3, h4, h5, h6, p, li {{ overflow-wrap: break-word; }}
pre {{
    background: {CODE_BACKGROUND};
    padding: {format_px(DEFAULT_CODE_PADDING)};
    overflow-x: auto;
}}
img {{ display: block; max-width: 100%; }}
.pdx-placeholder {{ background: {PLACEHOLDER_FILL}; outline: 1px solid {PLACEHOLDER_STROKE}; }}
.pdx-page-break {{ break-after: page; page-break-after: always; }}
"""

    # ------------------------------------------------------------------ blocks

    def _render_primitives(self, result: LayoutResult) -> str:
        output: list[str] = []
        open_list: tuple[int, str] | None = None

        for primitive in result.primitives:
            in_list = isinstance(primitive, TextBlock) and primitive.role == "list_item"
            group = primitive.list_group if in_list else None  # type: ignore[union-attr]
            if open_list is not None and (not in_list or group != open_list[0]):
                output.append(f"</{open_list[1]}>")
                open_list = None

            if isinstance(primitive, TextBlock):
                if primitive.role == "list_item":
                    if open_list is None:
                        tag = "ol" if primitive.ordered else "ul"
                        attrs = format_attributes({"dir": primitive.base_direction.value})
                        output.append(f"<{tag}{attrs}>")
                        open_list = (primitive.list_group, tag)
                    output.append(self._text_element("li", primitive))
                elif primitive.role == "heading":
                    output.append(self._text_element(f"h{primitive.level}", primitive))
                elif primitive.role == "code":
                    output.append(self._code_element(primitive))
                else:
                    output.append(self._text_element("p", primitive))
            elif isinstance(primitive, ImageBlock):
                output.append(self._image_element(primitive))
            elif isinstance(primitive, Rule):
                style = css_declarations({"border": "0", "border-top": f"1px solid {primitive.color}"})
                output.append(f'<hr style="{style}">')
            elif isinstance(primitive, Break) and primitive.forced:
                output.append('<div class="pdx-page-break"></div>')

        if open_list is not None:
            output.append(f"</{open_list[1]}>")
        return "\n".join(output)

    @staticmethod
    def _block_style(style: StyleRule, include_margins: bool = True) -> str:
        properties: dict[str, object] = {
            "font-size": format_px(style.font_size),
            "color": style.color,
            "text-align": style.alignment,
            "line-height": style.line_height,
        }
        if style.bold:
            properties["font-weight"] = "bold"
        if include_margins:
            properties["margin"] = f"{format_px(style.space_before)} 0 {format_px(style.space_after)}"
        return css_declarations(properties)

    def _text_element(self, tag: str, block: TextBlock) -> str:
        attrs = format_attributes(
            {
                "dir": block.base_direction.value,
                "lang": block.language,
                "style": self._block_style(block.style),
            }
        )
        return f"<{tag}{attrs}>{self.render_runs(list(block.source_runs), block.base_direction)}</{tag}>"

    def _code_element(self, block: TextBlock) -> str:
        text = "".join(run.text for run in block.source_runs)
        code_attrs = format_attributes({"class": f"language-{block.language}" if block.language else None})
        style = self._block_style(block.style) + ";font-family:monospace"
        return f'<pre dir="ltr" style="{style}"><code{code_attrs}>{escape_html(text)}</code></pre>'

    def _image_element(self, block: ImageBlock) -> str:
        attrs = format_attributes(
            {
                "src": block.resource_key,
                "alt": block.alt_text,
                "width": f"{block.size.width:.0f}",
                "height": f"{block.size.height:.0f}",
                "class": "pdx-placeholder" if block.placeholder else None,
            }
        )
        return f"<img{attrs}>"

    # ------------------------------------------------------------------ inline

    @staticmethod
    def render_runs(runs: list[TextRun], base: Direction) -> str:
        """Render runs in logical order with emphasis and direction spans."""
        directions = effective_directions(runs, base)
        parts: list[str] = []
        for run, direction in zip(runs, directions):
            if run.is_soft_break:
                parts.append("<br>")
                continue
            html = escape_html(run.text)
            if run.emphasis.italic:
                html = f"<em>{html}</em>"
            if run.emphasis.bold:
                html = f"<strong>{html}</strong>"
            if direction is not base:
                html = f"<span{format_attributes({'dir': direction.value, 'lang': run.language_hint})}>{html}</span>"
            parts.append(html)
        return "".join(parts)


__all__ = ["HtmlRenderer"]
