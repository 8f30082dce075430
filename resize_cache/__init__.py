"""
Resize Cache.

Content-addressed cache for derived images:
- Filenames from a SHA-256 prefix of the source content + slugged options
- Regeneration only when the artifact is missing or not newer than its source
- Atomic writes and per-key single-flight around the producer
"""

from resize_cache.errors import (
    DirectoryUnavailableError,
    InvalidGeometryError,
    InvalidInputError,
    ProductionFailedError,
    ResizeCacheError,
    UnreadableSourceError,
)
from resize_cache.filters import ResizeFilter
from resize_cache.models import CacheConfig, ResizeOptions, ResolvedArtifact
from resize_cache.services.cache import ArtifactCache, KeyDeriver
from resize_cache.services.resizer import ImageResizer, resize_image

__all__ = [
    "ArtifactCache",
    "CacheConfig",
    "DirectoryUnavailableError",
    "ImageResizer",
    "InvalidGeometryError",
    "InvalidInputError",
    "KeyDeriver",
    "ProductionFailedError",
    "ResizeCacheError",
    "ResizeFilter",
    "ResizeOptions",
    "ResolvedArtifact",
    "UnreadableSourceError",
    "resize_image",
]
