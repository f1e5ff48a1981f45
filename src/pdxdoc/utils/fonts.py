#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/utils/fonts.py
"""TrueType font discovery for the PDF and PNG backends.

Fonts are located by file name from a fixed list of candidates per role
(regular, bold, italic, bold_italic, mono and rtl). Directories are searched
in this order:

1. ``font_dirs`` passed to the provider (renderer option)
2. directories listed in ``PDXDOC_FONT_PATH`` (``os.pathsep`` separated)
3. ``./assets/fonts``
4. the font directory shipped with ReportLab (provides the Vera family)
5. common system font directories

"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import os
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Iterable, Optional

from pdxdoc.ast.nodes import Direction
from pdxdoc.bidi import is_rtl_char
from pdxdoc.constants import FONT_PATH_ENV_VAR, LATIN_FONT_CANDIDATES, RTL_FONT_CANDIDATES, SYSTEM_FONT_DIRS

logger = logging.getLogger(__name__)

FONT_ROLES = tuple(LATIN_FONT_CANDIDATES) + ("rtl",)


def font_role(
    direction: Direction, *, bold: bool = False, italic: bool = False, monospace: bool = False, text: str = ""
) -> str:
    """Return the font role a run is drawn with."""
    if monospace:
        return "mono"
    if direction is Direction.RTL or any(is_rtl_char(ch) for ch in text):
        return "rtl"
    if bold and italic:
        return "bold_italic"
    if bold:
        return "bold"
    return "italic" if italic else "regular"


@dataclass
class FontSource:
    """A TrueType font file loaded into memory.

    Parameters
    ----------
    name : str
        Name the font is registered under
    data : bytes
        Raw font file contents
    path : Path, optional
        File the data was read from

    """

    name: str
    data: bytes
    path: Optional[Path] = None
    _cmap: Optional[frozenset[int]] = field(default=None, init=False, repr=False, compare=False)

    @property
    def cmap(self) -> frozenset[int]:
        """Code points the font has a glyph for (computed on first access)."""
        if self._cmap is None:
            from reportlab.pdfbase.ttfonts import TTFontFile

            parsed = TTFontFile(BytesIO(self.data), validate=0)
            self._cmap = frozenset(cp for cp, glyph in parsed.charToGlyph.items() if glyph)
        return self._cmap

    def covers(self, ch: str) -> bool:
        return ord(ch) in self.cmap

    def stream(self) -> BytesIO:
        return BytesIO(self.data)


def _reportlab_font_dir() -> Optional[Path]:
    spec = importlib.util.find_spec("reportlab")
    if spec is None or spec.origin is None:
        return None
    return Path(spec.origin).parent / "fonts"


def registered_name(path: Path) -> str:
    """Return the process-wide font name for a file: its stem plus a short path digest."""
    digest = hashlib.md5(str(path.resolve()).encode("utf-8"), usedforsecurity=False).hexdigest()[:8]
    return f"PDX-{path.stem}-{digest}"


class FontProvider:
    """Locate and load fonts by role.

    Parameters
    ----------
    font_dirs : iterable of str or Path, optional
        Directories searched before the default search path

    Examples
    --------
        >>> provider = FontProvider()
        >>> provider.load("regular").name.startswith("PDX-Vera-")
        True

    """

    def __init__(self, font_dirs: Iterable[str | Path] = ()):
        self.font_dirs = tuple(Path(d).expanduser() for d in font_dirs)
        self._index: Optional[dict[str, Path]] = None
        self._loaded: dict[str, Optional[FontSource]] = {}

    def search_dirs(self) -> list[Path]:
        """Return existing search directories in priority order."""
        candidates: list[Path] = list(self.font_dirs)
        env_value = os.environ.get(FONT_PATH_ENV_VAR, "")
        candidates.extend(Path(p).expanduser() for p in env_value.split(os.pathsep) if p.strip())
        candidates.append(Path.cwd() / "assets" / "fonts")
        reportlab_dir = _reportlab_font_dir()
        if reportlab_dir is not None:
            candidates.append(reportlab_dir)
        candidates.extend(Path(d).expanduser() for d in SYSTEM_FONT_DIRS)

        seen: set[Path] = set()
        result = []
        for directory in candidates:
            if directory in seen or not directory.is_dir():
                continue
            seen.add(directory)
            result.append(directory)
        return result

    def _build_index(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for directory in self.search_dirs():
            try:
                files = sorted(directory.rglob("*"))
            except OSError as e:
                logger.debug("Skipping font directory %s: %s", directory, e)
                continue
            for file_path in files:
                if file_path.suffix.lower() == ".ttf":
                    index.setdefault(file_path.name.lower(), file_path)
        logger.debug("Indexed %d TrueType fonts", len(index))
        return index

    def find(self, candidates: Iterable[str]) -> Optional[Path]:
        """Return the first candidate file name present on the search path."""
        if self._index is None:
            self._index = self._build_index()
        for name in candidates:
            found = self._index.get(name.lower())
            if found is not None:
                return found
        return None

    def load(self, role: str) -> Optional[FontSource]:
        """Load the font for ``role``, or return None if no candidate exists.

        Raises
        ------
        ValueError
            If ``role`` is not a known font role

        """
        if role not in FONT_ROLES:
            raise ValueError(f"Unknown font role {role!r}; expected one of {FONT_ROLES}")
        if role in self._loaded:
            return self._loaded[role]

        candidates = RTL_FONT_CANDIDATES if role == "rtl" else LATIN_FONT_CANDIDATES[role]
        path = self.find(candidates)
        source = None
        if path is not None:
            try:
                source = FontSource(name=registered_name(path), data=path.read_bytes(), path=path)
            except OSError as e:
                logger.warning("Cannot read font %s: %s", path, e)
        if source is None:
            logger.debug("No %s font found", role)
        else:
            logger.debug("Using %s for %s text", path, role)
        self._loaded[role] = source
        return source


__all__ = ["FontSource", "FontProvider", "FONT_ROLES", "font_role", "registered_name"]
