#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/utils/io_utils.py
"""I/O helpers for export destinations and markup input sources."""

from __future__ import annotations

import io
from io import BytesIO, StringIO
from pathlib import Path
from typing import IO, Union, cast

OutputTarget = Union[str, Path, IO[bytes], IO[str]]
InputSource = Union[str, Path, bytes, IO[bytes], IO[str]]


def _is_binary_stream(output: object) -> bool:
    if isinstance(output, BytesIO):
        return True
    if isinstance(output, StringIO) or isinstance(output, io.TextIOBase):
        return False
    if isinstance(output, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(output, "mode", "")
    return isinstance(mode, str) and "b" in mode


def write_content(content: Union[str, bytes], output: Union[OutputTarget, None]) -> Union[StringIO, BytesIO, None]:
    """Write content to an output destination or return it as a file-like object.

    Parameters
    ----------
    content : str or bytes
        Content to write.
    output : str, Path, IO[bytes], IO[str], or None
        Destination. ``None`` returns a StringIO/BytesIO holding the content;
        a path is written as UTF-8 text or raw bytes; streams are written in
        their own mode, transcoding UTF-8 as needed.

    Returns
    -------
    StringIO, BytesIO, or None

    Raises
    ------
    TypeError
        If the output or content type is not supported
    OSError
        If the destination cannot be written

    """
    if not isinstance(content, (str, bytes)):
        raise TypeError(f"Content must be str or bytes, got {type(content)}")

    if output is None:
        return StringIO(content) if isinstance(content, str) else BytesIO(content)

    if isinstance(output, (str, Path)):
        output_path = Path(output)
        if isinstance(content, str):
            output_path.write_text(content, encoding="utf-8")
        else:
            output_path.write_bytes(content)
        return None

    if hasattr(output, "write"):
        if _is_binary_stream(output):
            binary_output = cast(IO[bytes], output)
            binary_output.write(content.encode("utf-8") if isinstance(content, str) else content)
        else:
            text_output = cast(IO[str], output)
            text_output.write(content.decode("utf-8") if isinstance(content, bytes) else content)
        return None

    raise TypeError(f"Unsupported output type: {type(output)}")


def read_text(source: InputSource) -> str:
    """Read UTF-8 text from a path, bytes, or stream.

    Strings are treated as file paths; pass markup text straight to the parser
    instead of through this function.
    """
    if isinstance(source, bytes):
        return source.decode("utf-8", errors="replace")
    if isinstance(source, (str, Path)):
        return Path(source).read_text(encoding="utf-8", errors="replace")
    data = source.read()
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def describe_target(output: object) -> str:
    """Return a short printable description of an output target for error messages."""
    if isinstance(output, (str, Path)):
        return str(output)
    name = getattr(output, "name", None)
    return str(name) if name else type(output).__name__


__all__ = ["OutputTarget", "InputSource", "write_content", "read_text", "describe_target"]
