#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/resources.py
"""Write-once image resource table.

:class:`Resources` maps an image path (the key written in the document) to a
decoded image. Entries are created with a claim-then-populate protocol: the
first caller atomically installs a reservation (an unfinished
:class:`concurrent.futures.Future`) and performs the decode; every other caller
for that key waits on the same reservation. Each path is therefore decoded at
most once, failures included, and an in-flight entry is never reported as a
final value.

The table never takes part in document equality.

"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Protocol

from pdxdoc.ast.nodes import Image, Node, Sequence
from pdxdoc.constants import DEPS_IMAGE_DECODE
from pdxdoc.exceptions import DependencyError, UnresolvedResourceError
from pdxdoc.utils.decorators import requires_dependencies

if TYPE_CHECKING:
    from PIL.Image import Image as PILImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedImage:
    """Decoded pixels plus intrinsic dimensions.

    Parameters
    ----------
    width, height : int
        Intrinsic pixel size
    image : PIL.Image.Image or None
        RGBA pixel data; None for decoders that only report dimensions
    format : str or None
        Source format name reported by the decoder (e.g. "PNG")

    """

    width: int
    height: int
    image: Optional["PILImage"] = None
    format: Optional[str] = None

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height else 1.0

    @property
    def has_alpha(self) -> bool:
        return self.image is not None and self.image.mode in ("RGBA", "LA", "PA")


class ImageDecoder(Protocol):
    """Image decoding service consumed by :class:`Resources`."""

    def decode(self, path: str) -> DecodedImage:
        """Decode ``path`` or raise :class:`UnresolvedResourceError`."""
        ...


class PillowImageDecoder:
    """Decode images from disk with Pillow.

    Parameters
    ----------
    base_dir : str or Path, optional
        Directory that document-relative paths are resolved against

    """

    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def resolve_path(self, path: str) -> Path:
        candidate = Path(os.path.expanduser(path))
        if not candidate.is_absolute() and self.base_dir is not None:
            candidate = self.base_dir / candidate
        return candidate

    @requires_dependencies("images", DEPS_IMAGE_DECODE)
    def decode(self, path: str) -> DecodedImage:
        from PIL import Image as PILImageModule
        from PIL import UnidentifiedImageError

        file_path = self.resolve_path(path)
        if not file_path.is_file():
            raise UnresolvedResourceError(path, reason="file not found")

        try:
            with PILImageModule.open(file_path) as img:
                source_format = img.format
                img.load()
                rgba = img.convert("RGBA")
        except UnidentifiedImageError as e:
            raise UnresolvedResourceError(path, reason="unsupported image format", original_error=e) from e
        except OSError as e:
            raise UnresolvedResourceError(path, reason=str(e), original_error=e) from e

        logger.debug("Decoded %s (%dx%d, %s)", path, rgba.width, rgba.height, source_format)
        return DecodedImage(width=rgba.width, height=rgba.height, image=rgba, format=source_format)


class Resources:
    """Lazily populated, write-once table of decoded images.

    Parameters
    ----------
    decoder : ImageDecoder, optional
        Decoding service; defaults to :class:`PillowImageDecoder`
    base_dir : str or Path, optional
        Passed to the default decoder for document-relative paths

    Examples
    --------
        >>> resources = Resources(base_dir="docs/")
        >>> resources.dimensions("figure.png") is None   # nothing loaded yet
        True
        >>> resources.load("figure.png").width
        640

    """

    def __init__(self, decoder: ImageDecoder | None = None, base_dir: str | Path | None = None):
        self.decoder: ImageDecoder = decoder if decoder is not None else PillowImageDecoder(base_dir)
        self._table: dict[str, Future[DecodedImage]] = {}

    def _claim(self, key: str) -> tuple[Future[DecodedImage], bool]:
        reservation: Future[DecodedImage] = Future()
        entry = self._table.setdefault(key, reservation)
        return entry, entry is reservation

    def load(self, key: str) -> DecodedImage:
        """Return the decoded image for ``key``, decoding it on first use.

        Raises
        ------
        UnresolvedResourceError
            If the image cannot be found or decoded (also on every later call)

        """
        entry, claimed = self._claim(key)
        if claimed:
            try:
                decoded = self.decoder.decode(key)
            except UnresolvedResourceError as e:
                logger.debug("Resource %s unresolved: %s", key, e.reason)
                entry.set_exception(e)
            except DependencyError as e:
                entry.set_exception(e)
            except Exception as e:
                entry.set_exception(UnresolvedResourceError(key, reason=str(e), original_error=e))
            else:
                entry.set_result(decoded)
        return entry.result()

    def try_load(self, key: str) -> Optional[DecodedImage]:
        """Like :meth:`load` but return None on failure."""
        try:
            return self.load(key)
        except UnresolvedResourceError:
            return None

    def get(self, key: str) -> Optional[DecodedImage]:
        """Return the decoded image if it is already resolved; never blocks."""
        entry = self._table.get(key)
        if entry is None or not entry.done() or entry.exception() is not None:
            return None
        return entry.result()

    def dimensions(self, key: str) -> Optional[tuple[int, int]]:
        """Return intrinsic ``(width, height)`` if resolved, else None."""
        decoded = self.get(key)
        return (decoded.width, decoded.height) if decoded is not None else None

    def is_resolved(self, key: str) -> bool:
        return self.get(key) is not None

    def failure(self, key: str) -> Optional[UnresolvedResourceError]:
        """Return the cached failure for ``key`` if its decode failed."""
        entry = self._table.get(key)
        if entry is None or not entry.done():
            return None
        error = entry.exception()
        return error if isinstance(error, UnresolvedResourceError) else None

    def preload(self, keys: Iterable[str], max_workers: int = 4) -> dict[str, Optional[DecodedImage]]:
        """Load several keys on a thread pool and return what resolved."""
        unique = list(dict.fromkeys(keys))
        if not unique:
            return {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(self.try_load, unique))
        return dict(zip(unique, results))

    def keys(self) -> list[str]:
        return list(self._table)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        resolved = sum(1 for key in self._table if self.is_resolved(key))
        return f"Resources(entries={len(self._table)}, resolved={resolved})"


def image_paths(node: Node) -> list[str]:
    """Collect image paths referenced by a tree, in document order."""
    if isinstance(node, Image):
        return [node.path]
    if isinstance(node, Sequence):
        return [n.path for n in node.walk() if isinstance(n, Image)]
    return []


__all__ = ["DecodedImage", "ImageDecoder", "PillowImageDecoder", "Resources", "image_paths"]
