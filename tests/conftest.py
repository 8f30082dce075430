"""Shared fixtures for the resize cache tests."""

import os
import time
from pathlib import Path

import pytest
from PIL import Image

from resize_cache.models import CacheConfig
from resize_cache.services.cache import ArtifactCache


def make_old(path: Path, age_seconds: float = 3600) -> None:
    """Backdate a file's mtime so fresh artifacts are strictly newer."""
    past = time.time() - age_seconds
    os.utime(path, (past, past))


class CountingProducer:
    """Producer that records its calls and writes a fixed payload."""

    def __init__(self, payload: bytes = b"artifact"):
        self.payload = payload
        self.calls = []

    def __call__(self, source_path, transform_params, dest_path):
        self.calls.append((Path(source_path), list(transform_params), Path(dest_path)))
        Path(dest_path).write_bytes(self.payload)


@pytest.fixture
def site_root(tmp_path):
    """Site root with a 64x48 photo.jpg, backdated by an hour."""
    root = tmp_path / "site"
    root.mkdir()
    photo = root / "photo.jpg"
    Image.new("RGB", (64, 48), (200, 40, 40)).save(photo, format="JPEG")
    make_old(photo)
    return root


@pytest.fixture
def cache(site_root):
    return ArtifactCache(CacheConfig(root_dir=site_root))


@pytest.fixture
def producer():
    return CountingProducer()
