"""Command-line interface for pdxdoc.

Opens a document container or a markup file and exports it to HTML, PDF,
PNG, markup or container JSON.

Examples
--------
Export a container to PDF:
    $ pdxdoc report.pdx --format pdf --out report.pdf

Render markup to a PNG at double zoom:
    $ pdxdoc notes.txt --format png --zoom 2 --out notes.png

Export the bilingual demo document:
    $ pdxdoc --sample --format pdf --out demo.pdf

Use environment variables for defaults:
    $ export PDXDOC_PAGE_SIZE=letter
    $ export PDXDOC_LOG_LEVEL=DEBUG
    $ pdxdoc report.pdx --format pdf --out report.pdf
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/pdxdoc/cli.py
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from pdxdoc.api import export, open_document
from pdxdoc.ast.document import Document
from pdxdoc.constants import DEFAULT_PAGE_SIZE, DEFAULT_PNG_HEIGHT, DEFAULT_PNG_WIDTH, PAGE_SIZES
from pdxdoc.exceptions import PdxError
from pdxdoc.logging_utils import configure_logging
from pdxdoc.options import HtmlRendererOptions, PdfRendererOptions, PngRendererOptions
from pdxdoc.options.base import BaseRendererOptions
from pdxdoc.sample import create_sample_document
from pdxdoc.utils.packages import get_package_version

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

FORMAT_EXTENSIONS = {"html": ".html", "pdf": ".pdf", "png": ".png", "markup": ".txt", "json": ".pdx"}
_BINARY_FORMATS = ("pdf", "png")
_TRUE_VALUES = ("true", "1", "yes", "on")


def get_env_var_value(key: str) -> Optional[str]:
    """Get environment variable with PDXDOC_ prefix.

    Parameters
    ----------
    key : str
        The parameter name (e.g., 'page_size', 'log_level')

    Returns
    -------
    Optional[str]
        Environment variable value or None if not set
    """
    env_key = f"PDXDOC_{key.upper().replace('-', '_')}"
    return os.environ.get(env_key)


def apply_env_vars_to_parser(parser: argparse.ArgumentParser) -> None:
    """Apply environment variables as defaults to parser arguments.

    CLI arguments still take precedence over environment variables.
    """
    for action in parser._actions:
        if not action.dest or action.dest in ("help", "version", "input"):
            continue
        env_value = get_env_var_value(action.dest)
        if env_value is None:
            continue

        if isinstance(action, argparse._StoreTrueAction):
            action.default = env_value.lower() in _TRUE_VALUES
        elif action.type in (int, float):
            try:
                action.default = action.type(env_value)
            except ValueError:
                logger.warning(
                    "Invalid %s value for PDXDOC_%s: %s", action.type.__name__, action.dest.upper(), env_value
                )
        elif action.choices:
            if env_value in action.choices:
                action.default = env_value
            else:
                logger.warning(
                    "Invalid choice for PDXDOC_%s: %s. Choices: %s",
                    action.dest.upper(),
                    env_value,
                    list(action.choices),
                )
        else:
            action.default = env_value


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pdxdoc",
        description="Export bilingual (Arabic/English) documents to HTML, PDF and PNG.",
        epilog="Every option can also be set with a PDXDOC_<OPTION> environment variable.",
    )
    parser.add_argument("input", nargs="?", help="Document container (.pdx/.json) or markup text file")
    parser.add_argument("--sample", action="store_true", help="Use the built-in bilingual demo document")
    parser.add_argument(
        "--format",
        dest="format",
        choices=list(FORMAT_EXTENSIONS),
        default="pdf",
        help="Output format (default: pdf)",
    )
    parser.add_argument("--out", "-o", dest="out", help="Output path (text formats default to stdout)")
    parser.add_argument("--zoom", type=float, default=1.0, help="Zoom factor for fonts and spacing")
    parser.add_argument(
        "--page-size", dest="page_size", choices=list(PAGE_SIZES), default=DEFAULT_PAGE_SIZE, help="PDF page size"
    )
    parser.add_argument("--page-numbers", dest="page_numbers", action="store_true", help="Number PDF pages")
    parser.add_argument("--width", type=int, default=DEFAULT_PNG_WIDTH, help="PNG canvas width in pixels")
    parser.add_argument("--height", type=int, default=DEFAULT_PNG_HEIGHT, help="PNG canvas height in pixels")
    parser.add_argument(
        "--font-dir", dest="font_dir", action="append", default=[], help="Extra font directory (repeatable)"
    )
    parser.add_argument(
        "--strict-images",
        dest="strict_images",
        action="store_true",
        help="Fail instead of drawing placeholders for missing images",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", dest="log_file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Verbose log format with timestamps")
    parser.add_argument("--version", action="version", version=f"pdxdoc {get_package_version('pdxdoc') or 'unknown'}")
    apply_env_vars_to_parser(parser)
    return parser


def build_renderer_options(args: argparse.Namespace) -> Optional[BaseRendererOptions]:
    """Create renderer options for the selected format from parsed arguments.

    Raises
    ------
    ValueError
        If an option value is out of range
    """
    font_dirs = tuple(args.font_dir)
    if args.format == "pdf":
        return PdfRendererOptions(
            page_size=args.page_size,
            zoom=args.zoom,
            include_page_numbers=args.page_numbers,
            font_dirs=font_dirs,
            fail_on_resource_errors=args.strict_images,
        )
    if args.format == "png":
        return PngRendererOptions(
            width=args.width,
            height=args.height,
            zoom=args.zoom,
            font_dirs=font_dirs,
            fail_on_resource_errors=args.strict_images,
        )
    if args.format == "html":
        return HtmlRendererOptions(zoom=args.zoom, fail_on_resource_errors=args.strict_images)
    return None


def _default_output(args: argparse.Namespace) -> Optional[Path]:
    if args.out:
        return Path(args.out)
    if args.format not in _BINARY_FORMATS:
        return None
    stem = Path(args.input).stem if args.input else "sample"
    return Path(f"{stem}{FORMAT_EXTENSIONS[args.format]}")


def load_input(args: argparse.Namespace) -> Document:
    if args.sample:
        return create_sample_document()
    return open_document(args.input)


def main(argv: Optional[list[str]] = None) -> int:
    """Run the command line; returns the process exit status."""
    parser = create_parser()
    args = parser.parse_args(argv)
    if not args.sample and not args.input:
        parser.error("an INPUT file or --sample is required")

    configure_logging(args.log_level, log_file=args.log_file, trace_mode=args.trace)

    try:
        options = build_renderer_options(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    output = _default_output(args)
    try:
        doc = load_input(args)
        content = export(doc, args.format, output, options)
    except PdxError as e:
        logger.debug("Export failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if content is not None:
        sys.stdout.write(content if isinstance(content, str) else content.decode("utf-8"))
    else:
        logger.info("Wrote %s", output)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
