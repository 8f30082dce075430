"""Tests for the resize filter entry point."""

import hashlib

import pytest
from PIL import Image

from resize_cache.errors import InvalidInputError, ProductionFailedError
from resize_cache.filters import ResizeFilter
from resize_cache.models import ResizeOptions
from resize_cache.services.resizer import resize_image


def test_options_parsing():
    assert ResizeOptions.from_string("800x800>").to_params() == ["800x800>"]
    options = ResizeOptions.from_string("800x800>,webp,80")
    assert (options.resize, options.image_format, options.quality) == ("800x800>", "webp", 80)
    assert options.to_params() == ["800x800>", "webp", "80"]
    assert ResizeOptions.from_string("800x800>,,75").to_params() == ["800x800>", "", "75"]


@pytest.mark.parametrize("options", [",webp", "800x800>,webp,high"])
def test_bad_options(options):
    with pytest.raises(InvalidInputError):
        ResizeOptions.from_string(options)


def test_end_to_end_webp(cache, site_root):
    resize_filter = ResizeFilter(cache)
    short_hash = hashlib.sha256((site_root / "photo.jpg").read_bytes()).hexdigest()[:32]
    expected = f"cache/resize/{short_hash}_800x800webp80.webp"

    first = resize_filter.resolve("photo.jpg", "800x800>,webp,80")
    assert first.regenerated is True
    assert first.dest_path_relative == expected
    with Image.open(first.dest_path) as out:
        assert out.format == "WEBP"
        # 800x800> never enlarges the 64x48 source
        assert out.size == (64, 48)

    second = resize_filter.resolve("photo.jpg", "800x800>,webp,80")
    assert second.regenerated is False
    assert second.dest_path_relative == expected
    assert resize_filter.static_files == [expected]


def test_resize_returns_url(cache):
    assert ResizeFilter(cache).resize("photo.jpg", "32x32").startswith("cache/resize/")
    url = ResizeFilter(cache, baseurl="/blog/").resize("photo.jpg", "32x32")
    assert url.startswith("/blog/cache/resize/")
    assert url.endswith("_32x32.jpg")


def test_resize_writes_resized_image(cache):
    artifact = ResizeFilter(cache).resolve("photo.jpg", "32x32")
    with Image.open(artifact.dest_path) as out:
        assert out.size == (32, 24)
        assert out.format == "JPEG"


@pytest.mark.parametrize(
    "source, options",
    [(None, "800x800>"), ("", "800x800>"), ("photo.jpg", None), ("photo.jpg", ""), ("photo.jpg", "huge")],
)
def test_invalid_arguments(cache, source, options):
    with pytest.raises(InvalidInputError):
        ResizeFilter(cache).resize(source, options)
    assert not cache.cache_dir.exists()


def test_corrupt_source_fails_production(cache, site_root):
    (site_root / "broken.jpg").write_bytes(b"not really a jpeg")
    resize_filter = ResizeFilter(cache)

    with pytest.raises(ProductionFailedError):
        resize_filter.resize("broken.jpg", "10x10")
    assert resize_filter.static_files == []


def test_quality_without_format_round_trips_through_producer(cache):
    params = ResizeOptions.from_string("32x32,,75").to_params()
    artifact = cache.resolve("photo.jpg", params, resize_image)

    assert artifact.dest_path.name.endswith("_32x3275.jpg")
    with Image.open(artifact.dest_path) as out:
        assert out.format == "JPEG"
        assert out.size == (32, 24)


def test_quality_without_format_through_filter(cache):
    url = ResizeFilter(cache).resize("photo.jpg", "32x32,,75")
    assert url.endswith("_32x3275.jpg")
