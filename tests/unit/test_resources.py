#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_resources.py
"""Unit tests for the write-once image resource table."""

import threading

import pytest
from utils import PIL_AVAILABLE, CountingDecoder, StaticDecoder

from pdxdoc.ast.nodes import Image, Paragraph, Sequence
from pdxdoc.exceptions import UnresolvedResourceError
from pdxdoc.resources import PillowImageDecoder, Resources, image_paths


@pytest.mark.unit
class TestResourceTable:
    """Tests for load/get semantics."""

    def test_load_caches_result(self):
        decoder = StaticDecoder({"a.png": (4, 2)})
        resources = Resources(decoder=decoder)
        first = resources.load("a.png")
        second = resources.load("a.png")
        assert first is second
        assert decoder.calls == ["a.png"]
        assert resources.dimensions("a.png") == (4, 2)

    def test_get_never_decodes(self):
        decoder = StaticDecoder({"a.png": (4, 2)})
        resources = Resources(decoder=decoder)
        assert resources.get("a.png") is None
        assert resources.dimensions("a.png") is None
        assert decoder.calls == []
        assert "a.png" not in resources

    def test_failure_is_cached(self):
        decoder = StaticDecoder()
        resources = Resources(decoder=decoder)
        with pytest.raises(UnresolvedResourceError):
            resources.load("missing.png")
        with pytest.raises(UnresolvedResourceError):
            resources.load("missing.png")
        assert decoder.calls == ["missing.png"]
        assert resources.get("missing.png") is None
        assert resources.failure("missing.png").path == "missing.png"
        assert not resources.is_resolved("missing.png")

    def test_try_load(self):
        resources = Resources(decoder=StaticDecoder({"a.png": (1, 1)}))
        assert resources.try_load("a.png").width == 1
        assert resources.try_load("b.png") is None

    def test_unexpected_decoder_error_is_wrapped(self):
        class Exploding:
            def decode(self, path):
                raise RuntimeError("boom")

        resources = Resources(decoder=Exploding())
        with pytest.raises(UnresolvedResourceError, match="boom"):
            resources.load("x.png")

    def test_keys_and_repr(self):
        resources = Resources(decoder=StaticDecoder({"a.png": (1, 1)}))
        resources.try_load("a.png")
        resources.try_load("b.png")
        assert resources.keys() == ["a.png", "b.png"]
        assert len(resources) == 2
        assert repr(resources) == "Resources(entries=2, resolved=1)"


@pytest.mark.unit
class TestConcurrentLoading:
    """Tests for at-most-once decoding under concurrency."""

    def test_concurrent_loads_decode_once(self):
        decoder = CountingDecoder(delay=0.05)
        resources = Resources(decoder=decoder)
        barrier = threading.Barrier(8)
        results = []
        lock = threading.Lock()

        def worker():
            barrier.wait()
            decoded = resources.load("shared.png")
            with lock:
                results.append(decoded)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert decoder.counts == {"shared.png": 1}
        assert len(results) == 8
        assert all(result is results[0] for result in results)

    def test_concurrent_failures_decode_once(self):
        decoder = CountingDecoder(delay=0.02, fail={"bad.png"})
        resources = Resources(decoder=decoder)
        errors = []

        def worker():
            try:
                resources.load("bad.png")
            except UnresolvedResourceError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert decoder.counts == {"bad.png": 1}
        assert len(errors) == 6

    def test_preload(self):
        decoder = CountingDecoder(delay=0.01, fail={"bad.png"})
        resources = Resources(decoder=decoder)
        loaded = resources.preload(["a.png", "b.png", "a.png", "bad.png"])
        assert set(loaded) == {"a.png", "b.png", "bad.png"}
        assert loaded["bad.png"] is None
        assert loaded["a.png"].width == 10
        assert decoder.counts == {"a.png": 1, "b.png": 1, "bad.png": 1}

    def test_preload_nothing(self):
        assert Resources(decoder=StaticDecoder()).preload([]) == {}


@pytest.mark.unit
class TestImagePaths:
    """Tests for collecting image references."""

    def test_collects_in_document_order(self):
        tree = Sequence([Image("b.png"), Paragraph(), Sequence([Image("a.png")]), Image("b.png")])
        assert image_paths(tree) == ["b.png", "a.png", "b.png"]

    def test_single_image_and_other_nodes(self):
        assert image_paths(Image("x.png")) == ["x.png"]
        assert image_paths(Paragraph()) == []


@pytest.mark.unit
@pytest.mark.skipif(not PIL_AVAILABLE, reason="Pillow not installed")
class TestPillowDecoder:
    """Tests for decoding real files with Pillow."""

    def test_decode_png(self, png_file):
        decoded = Resources(base_dir=png_file.parent).load(png_file.name)
        assert (decoded.width, decoded.height) == (40, 20)
        assert decoded.format == "PNG"
        assert decoded.image.mode == "RGBA"
        assert decoded.aspect_ratio == 2.0
        assert decoded.has_alpha

    def test_missing_file(self, tmp_path):
        with pytest.raises(UnresolvedResourceError, match="file not found"):
            PillowImageDecoder(tmp_path).decode("nope.png")

    def test_not_an_image(self, tmp_path):
        (tmp_path / "fake.png").write_bytes(b"definitely not a png")
        with pytest.raises(UnresolvedResourceError, match="unsupported image format"):
            PillowImageDecoder(tmp_path).decode("fake.png")

    def test_absolute_path_ignores_base_dir(self, png_file, tmp_path):
        decoder = PillowImageDecoder(tmp_path / "elsewhere")
        assert decoder.resolve_path(str(png_file)) == png_file
