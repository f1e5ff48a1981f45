"""Test utilities for the pdxdoc test suite.

Helpers for building documents, fake image decoders and backend
availability checks shared by the unit and integration tests.
"""

import importlib.util
import threading
import time

from pdxdoc.ast.document import Document, Metadata
from pdxdoc.ast.nodes import Sequence
from pdxdoc.exceptions import UnresolvedResourceError
from pdxdoc.resources import DecodedImage, Resources

REPORTLAB_AVAILABLE = importlib.util.find_spec("reportlab") is not None
PIL_AVAILABLE = importlib.util.find_spec("PIL") is not None
PYPDF_AVAILABLE = importlib.util.find_spec("pypdf") is not None
SHAPING_AVAILABLE = (
    importlib.util.find_spec("arabic_reshaper") is not None and importlib.util.find_spec("bidi") is not None
)


class StaticDecoder:
    """Decoder reporting fixed dimensions for known paths; other paths fail."""

    def __init__(self, sizes=None):
        self.sizes = dict(sizes or {})
        self.calls = []

    def decode(self, path):
        self.calls.append(path)
        if path not in self.sizes:
            raise UnresolvedResourceError(path, reason="file not found")
        width, height = self.sizes[path]
        return DecodedImage(width=width, height=height)


class CountingDecoder:
    """Slow decoder that counts calls per path, for concurrency tests."""

    def __init__(self, delay=0.05, fail=()):
        self.delay = delay
        self.fail = set(fail)
        self.counts = {}
        self._lock = threading.Lock()

    def decode(self, path):
        with self._lock:
            self.counts[path] = self.counts.get(path, 0) + 1
        time.sleep(self.delay)
        if path in self.fail:
            raise UnresolvedResourceError(path, reason="broken")
        return DecodedImage(width=10, height=5)


def make_document(content: Sequence, title: str = "Test Document", resources=None) -> Document:
    """Wrap a node tree in a document with fixed metadata."""
    metadata = Metadata(title=title, created="2025-01-01T00:00:00+00:00", modified="2025-01-01T00:00:00+00:00")
    return Document(metadata=metadata, content=content, resources=resources if resources is not None else Resources())


def rtl_font_available() -> bool:
    """Return True when a font with Arabic coverage is on the font search path."""
    from pdxdoc.utils.fonts import FontProvider

    return FontProvider().load("rtl") is not None
