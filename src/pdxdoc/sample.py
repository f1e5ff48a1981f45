#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/sample.py
"""Bilingual demo document used by ``pdxdoc --sample`` and the tests."""

from __future__ import annotations

from pdxdoc.ast.document import Document, Metadata
from pdxdoc.ast.nodes import Divider, Heading, List, Paragraph, Sequence
from pdxdoc.bidi import make_runs
from pdxdoc.styles import StyleSheet

SAMPLE_TITLE = "PDX Demo Document"

_FEATURES = (
    "Real PDF export with Arabic font embedding",
    "PNG image export for sharing",
    "Image embedding support in documents",
    "Comfort theme - optimized for long writing sessions",
)


def create_sample_document() -> Document:
    """Build the demo document: English and Arabic sections, a mixed heading and a list.

    Examples
    --------
        >>> doc = create_sample_document()
        >>> doc.content.block_count()
        8

    """
    content = Sequence(
        [
            Heading(1, make_runs("Welcome to PDX Editor")),
            Paragraph(
                make_runs(
                    "PDX is a modern document format with full Arabic support, real PDF/PNG export, "
                    "and a comfortable theme for long writing sessions."
                )
            ),
            Divider(),
            Heading(2, make_runs("مرحباً بك في محرر PDX")),
            Paragraph(
                make_runs(
                    "هذا المحرر يدعم اللغة العربية بشكل كامل مع الكتابة من اليمين إلى اليسار. "
                    "يمكنك كتابة المستندات بالعربية بسهولة تامة."
                )
            ),
            Divider(),
            Heading(2, make_runs("New Features - المميزات الجديدة")),
            List(ordered=False, items=[make_runs(item) for item in _FEATURES]),
        ]
    )
    metadata = Metadata(
        title=SAMPLE_TITLE,
        author="PDX Editor",
        language="en",
        keywords=["pdx", "document", "مستند"],
    )
    return Document(metadata=metadata, stylesheet=StyleSheet.default(), content=content)


__all__ = ["create_sample_document", "SAMPLE_TITLE"]
