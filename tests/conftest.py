"""Pytest configuration and shared fixtures for pdxdoc tests."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# tests/conftest.py

import os

import pytest
from hypothesis import HealthCheck, Verbosity, settings
from utils import PIL_AVAILABLE, StaticDecoder

from pdxdoc.ast.nodes import Direction, Paragraph, Sequence, TextRun
from pdxdoc.resources import Resources
from pdxdoc.sample import create_sample_document

# Configure Hypothesis profiles for different test environments
settings.register_profile(
    "ci",
    max_examples=1000,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    verbosity=Verbosity.normal,
)

settings.register_profile(
    "dev",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    verbosity=Verbosity.normal,
)

settings.register_profile(
    "debug",
    max_examples=10,
    deadline=None,
    verbosity=Verbosity.verbose,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across the pipeline")
    config.addinivalue_line("markers", "pdf: Tests requiring the PDF backend")
    config.addinivalue_line("markers", "png: Tests requiring the PNG backend")
    config.addinivalue_line("markers", "fuzzing: Property-based tests")


@pytest.fixture
def sample_doc():
    """Bilingual demo document."""
    return create_sample_document()


@pytest.fixture
def markup_text():
    """Markup exercising every block kind."""
    return (
        "# Report\n"
        "\n"
        "First line with **bold** and *italic*\n"
        "second line\n"
        "\n"
        "- one\n"
        "- two\n"
        "\n"
        "1. first\n"
        "2. second\n"
        "\n"
        "```python\n"
        "print('hi')\n"
        "```\n"
        "\n"
        "![Chart](chart.png){width=120 height=80}\n"
        "\n"
        "---\n"
        "\n"
        "===\n"
        "\n"
        "## مرحبا بالعالم\n"
    )


@pytest.fixture
def static_resources():
    """Resource table backed by a decoder that needs no image files."""
    return Resources(decoder=StaticDecoder({"wide.png": (400, 100)}))


@pytest.fixture
def rtl_paragraph():
    """Arabic paragraph ending with a Latin run."""
    return Sequence([Paragraph([TextRun("مرحبا بك في ", Direction.RTL, "ar"), TextRun("PDX", Direction.LTR)])])


@pytest.fixture
def png_file(tmp_path):
    """A small opaque PNG on disk."""
    if not PIL_AVAILABLE:
        pytest.skip("Pillow not installed")
    from PIL import Image

    path = tmp_path / "pixel.png"
    Image.new("RGBA", (40, 20), (200, 30, 30, 255)).save(path)
    return path
