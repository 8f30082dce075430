"""Tests for single-flight, retry wrapping and settings."""

from pathlib import Path

import pytest

from resize_cache.config import Settings
from resize_cache.services.cache import SingleFlight
from resize_cache.utils.retry import with_retries


def test_single_flight_releases_keys():
    flight = SingleFlight()
    with flight.lock("a"):
        assert flight.active_keys() == ["a"]
    assert flight.active_keys() == []


def test_single_flight_releases_on_error():
    flight = SingleFlight()
    with pytest.raises(RuntimeError):
        with flight.lock("a"):
            raise RuntimeError("boom")
    assert flight.active_keys() == []


def test_with_retries_retries_then_succeeds(tmp_path):
    attempts = []

    def flaky(source_path, params, dest_path):
        attempts.append(1)
        if len(attempts) < 3:
            raise OSError("transient")
        Path(dest_path).write_bytes(b"ok")

    dest = tmp_path / "out.bin"
    with_retries(flaky, attempts=3, max_wait=0)(tmp_path / "src", ["1x1"], dest)

    assert len(attempts) == 3
    assert dest.read_bytes() == b"ok"


def test_with_retries_reraises_last_error(tmp_path):
    def broken(source_path, params, dest_path):
        raise OSError("still broken")

    with pytest.raises(OSError, match="still broken"):
        with_retries(broken, attempts=2, max_wait=0)(tmp_path / "src", ["1x1"], tmp_path / "out")


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("RESIZE_CACHE_ROOT_DIR", str(tmp_path))
    monkeypatch.setenv("RESIZE_CACHE_HASH_LENGTH", "16")
    monkeypatch.setenv("RESIZE_CACHE_CACHE_SUBDIR", "derived/")

    config = Settings().cache_config()

    assert config.root_dir == tmp_path
    assert config.hash_length == 16
    assert config.cache_dir == tmp_path / "derived"


def test_settings_root_override(tmp_path):
    config = Settings().cache_config(root_dir=tmp_path)
    assert config.root_dir == tmp_path
    assert config.cache_subdir == "cache/resize/"
