"""
Artifact cache: freshness checks and at-most-once regeneration.

All state lives on the filesystem. An entry is fresh when its file exists
and is strictly newer than its source; anything else is regenerated by the
caller-supplied producer and moved into place atomically.
"""

import logging
import os
import posixpath
import tempfile
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Sequence

from resize_cache.constants import TEMP_SUFFIX
from resize_cache.errors import (
    DirectoryUnavailableError,
    InvalidInputError,
    ProductionFailedError,
    UnreadableSourceError,
)
from resize_cache.models import CacheConfig, CacheEntryInfo, ResolvedArtifact
from resize_cache.services.logger_service import log_performance

from .keys import KeyDeriver, resolve_extension
from .single_flight import SingleFlight

logger = logging.getLogger(__name__)

# (source_path, transform_params, dest_path) -> None, raises on failure
Producer = Callable[[Path, Sequence[str], Path], Any]


def must_regenerate(dest_path: Path, source_path: Path) -> bool:
    """
    Decide whether an artifact has to be (re)built.

    Equal timestamps count as stale: on coarse filesystem clocks a source
    rewritten in the same tick as its artifact would otherwise be missed.
    """
    try:
        source_mtime = source_path.stat().st_mtime
    except OSError as e:
        raise UnreadableSourceError(source_path, e.strerror or str(e)) from e

    try:
        dest_mtime = dest_path.stat().st_mtime
    except OSError:
        # Missing, or a name the filesystem rejects; production reports the latter
        return True
    return dest_mtime <= source_mtime


class ArtifactCache:
    """
    Flat, content-addressed cache of derived files.

    Supports:
    - Deterministic filenames from source content + transform params
    - mtime-based staleness with regeneration in place
    - Atomic publication of producer output
    - Per-key single-flight for threaded callers
    """

    def __init__(self, config: CacheConfig):
        """
        Initialize artifact cache.

        The cache directory is created lazily on the first resolve.

        Args:
            config: Root and cache directory layout
        """
        self.config = config
        self.root_dir = Path(config.root_dir)
        self.keys = KeyDeriver(hash_length=config.hash_length)
        self._flight = SingleFlight()

        # Stats
        self.stats = {"hits": 0, "misses": 0, "failures": 0}
        self._stats_lock = threading.Lock()

    @property
    def cache_dir(self) -> Path:
        return self.config.cache_dir

    def _count(self, name: str) -> None:
        with self._stats_lock:
            self.stats[name] += 1

    def resolve(
        self,
        source_path: str | Path,
        transform_params: Sequence[str],
        producer: Producer,
        forced_extension: str | None = None,
    ) -> ResolvedArtifact:
        """
        Return the cached artifact for a source, producing it if needed.

        Args:
            source_path: Source file, absolute or relative to root_dir
            transform_params: Ordered params describing the derivation
            producer: Called as producer(source_path, params, dest_path) on a miss
            forced_extension: Output extension override

        Returns:
            ResolvedArtifact with absolute and root-relative paths

        Raises:
            InvalidInputError: Empty/malformed input, or source outside root_dir
            UnreadableSourceError: Source missing or unreadable
            DirectoryUnavailableError: Cache directory cannot be created or written to
            ProductionFailedError: Producer raised or wrote nothing
        """
        src_path = self._validate(source_path, transform_params)
        dest_path, dest_path_rel = self.dest_paths(src_path, transform_params, forced_extension)

        self._ensure_cache_dir()

        if not must_regenerate(dest_path, src_path):
            self._count("hits")
            logger.debug(f"Cache HIT: {dest_path_rel}")
            return ResolvedArtifact(dest_path=dest_path, dest_path_relative=dest_path_rel)

        with self._flight.lock(dest_path.name):
            # Another thread may have produced it while we waited
            if not must_regenerate(dest_path, src_path):
                self._count("hits")
                logger.debug(f"Cache HIT after wait: {dest_path_rel}")
                return ResolvedArtifact(dest_path=dest_path, dest_path_relative=dest_path_rel)

            self._count("misses")
            logger.info(f"Cache MISS - producing {dest_path_rel}")
            self._produce(src_path, list(transform_params), dest_path, producer)

        return ResolvedArtifact(
            dest_path=dest_path,
            dest_path_relative=dest_path_rel,
            regenerated=True,
        )

    def dest_paths(
        self,
        source_path: str | Path,
        transform_params: Sequence[str],
        forced_extension: str | None = None,
    ) -> tuple[Path, str]:
        """
        Absolute and root-relative destination of a cache entry.

        Hashes the source; does not touch the cache directory.
        """
        dest_filename = self.keys.derive_filename(source_path, transform_params, forced_extension)
        dest_path = self.cache_dir / dest_filename
        dest_path_rel = posixpath.join(self.config.cache_subdir, dest_filename)
        return dest_path, dest_path_rel

    def _validate(self, source_path: str | Path, transform_params: Sequence[str]) -> Path:
        if not isinstance(source_path, (str, Path)):
            raise InvalidInputError(f"`source_path` must be a string or path - got: {type(source_path).__name__}")
        if source_path in ("", Path("")):
            raise InvalidInputError("`source_path` may not be empty")
        if isinstance(transform_params, str) or not transform_params:
            raise InvalidInputError("`transform_params` must be a non-empty sequence of strings")
        for param in transform_params:
            if not isinstance(param, str):
                raise InvalidInputError(f"Transform params must be strings - got: {type(param).__name__}")

        root = self.root_dir.resolve()
        src_path = (root / source_path).resolve()
        if not src_path.is_relative_to(root):
            raise InvalidInputError(f"Source {source_path} is outside of {root}")

        if not src_path.is_file() or not os.access(src_path, os.R_OK):
            raise UnreadableSourceError(src_path)

        return src_path

    def _ensure_cache_dir(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryUnavailableError(f"Cannot create cache directory {self.cache_dir}: {e}") from e

    def _produce(
        self,
        src_path: Path,
        transform_params: list[str],
        dest_path: Path,
        producer: Producer,
    ) -> None:
        # Temp file keeps the real extension so producers can infer the format.
        # Only the short hash goes into its name, so it is never longer than a
        # legal destination name.
        ext = resolve_extension(dest_path)
        short_hash = dest_path.name.split("_", 1)[0]
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".tmp-{short_hash}.",
                suffix=f"{TEMP_SUFFIX}{ext}",
                dir=self.cache_dir,
            )
            os.close(fd)
        except OSError as e:
            self._count("failures")
            raise DirectoryUnavailableError(f"Cannot write to cache directory {self.cache_dir}: {e}") from e
        tmp_path = Path(tmp_name)

        try:
            with log_performance(f"Produce {dest_path.name}", logger):
                producer(src_path, transform_params, tmp_path)

            if not tmp_path.exists() or tmp_path.stat().st_size == 0:
                raise ProductionFailedError(src_path, dest_path, "producer wrote no output")

            os.replace(tmp_path, dest_path)
        except ProductionFailedError:
            self._count("failures")
            tmp_path.unlink(missing_ok=True)
            raise
        except Exception as e:
            self._count("failures")
            tmp_path.unlink(missing_ok=True)
            raise ProductionFailedError(src_path, dest_path, str(e) or type(e).__name__) from e

    def entries(self) -> list[CacheEntryInfo]:
        """List cached artifacts, skipping in-progress temporary files."""
        if not self.cache_dir.is_dir():
            return []

        result = []
        for path in sorted(self.cache_dir.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            stat = path.stat()
            result.append(
                CacheEntryInfo(
                    filename=path.name,
                    path=path,
                    size_bytes=stat.st_size,
                    modified_at=datetime.fromtimestamp(stat.st_mtime),
                )
            )
        return result

    def clean(self, max_age_days: float) -> int:
        """
        Delete artifacts not modified within max_age_days.

        The cache never evicts on its own; this is for callers that want
        periodic cleanup.

        Returns:
            Number of files deleted
        """
        cutoff_time = time.time() - (max_age_days * 24 * 60 * 60)
        deleted_count = 0

        for entry in self.entries():
            if entry.path.stat().st_mtime < cutoff_time:
                entry.path.unlink(missing_ok=True)
                deleted_count += 1

        if deleted_count > 0:
            logger.info(f"Cleaned up {deleted_count} cache entries (>{max_age_days} days)")
        return deleted_count

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with session counters, on-disk totals and hit rate
        """
        entries = self.entries()
        lookups = self.stats["hits"] + self.stats["misses"]

        return {
            "session": dict(self.stats),
            "disk": {
                "total_entries": len(entries),
                "total_bytes": sum(e.size_bytes for e in entries),
            },
            "hit_rate": self.stats["hits"] / lookups if lookups > 0 else 0.0,
        }
