"""
Content-addressed artifact cache for resized images.

Provides:
- Deterministic filenames from source content + transform params
- mtime-based staleness and in-place regeneration
- Atomic writes and per-key single-flight for producers
"""

from .artifact_cache import ArtifactCache, Producer, must_regenerate
from .keys import KeyDeriver, hash_file, slugify
from .single_flight import SingleFlight

__all__ = [
    "ArtifactCache",
    "KeyDeriver",
    "Producer",
    "SingleFlight",
    "hash_file",
    "must_regenerate",
    "slugify",
]
