"""Data models for the resize cache."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from resize_cache.constants import CACHE_DIR, HASH_LENGTH, PARAM_SEPARATOR
from resize_cache.errors import InvalidInputError


class CacheConfig(BaseModel):
    """Where the cache lives. Passed explicitly to ArtifactCache."""

    root_dir: Path = Field(..., description="Root directory sources are resolved against")
    cache_subdir: str = Field(default=CACHE_DIR, description="Cache directory relative to root_dir")
    hash_length: int = Field(
        default=HASH_LENGTH,
        ge=8,
        le=64,
        description="Hex characters kept from the SHA-256 digest",
    )

    @property
    def cache_dir(self) -> Path:
        """Absolute cache directory."""
        return Path(self.root_dir) / self.cache_subdir


class ResolvedArtifact(BaseModel):
    """Result of a resolve call, identical in shape for hits and misses."""

    dest_path: Path = Field(..., description="Absolute path of the cached artifact")
    dest_path_relative: str = Field(..., description="Path relative to root_dir, for publishing")
    regenerated: bool = Field(default=False, description="True if the producer ran for this call")


class ResizeOptions(BaseModel):
    """Options given to the resize filter, e.g. ``"800x800>,webp,80"``."""

    resize: str = Field(..., min_length=1, description="Resize geometry, always present")
    image_format: str | None = Field(default=None, description="Output format (extension) override")
    quality: int | None = Field(default=None, description="Output quality 1-100")

    @classmethod
    def from_string(cls, options: str) -> "ResizeOptions":
        """Split a comma separated option string into its components."""
        parts = [part.strip() for part in options.split(PARAM_SEPARATOR)]
        resize = parts[0]
        if not resize:
            raise InvalidInputError("`options` must start with a resize option")

        image_format = parts[1] if len(parts) > 1 and parts[1] else None

        quality = None
        if len(parts) > 2 and parts[2]:
            try:
                quality = int(parts[2])
            except ValueError:
                raise InvalidInputError(f"Image quality must be an integer - got: {parts[2]!r}") from None

        return cls(resize=resize, image_format=image_format, quality=quality)

    def to_params(self) -> list[str]:
        """
        Transform params in key order: resize, format, quality.

        A missing format keeps its slot as "" when a quality follows, so the
        params parse back into the same options. Empty slots add nothing to
        the slug.
        """
        params = [self.resize]
        if self.image_format or self.quality is not None:
            params.append(self.image_format or "")
        if self.quality is not None:
            params.append(str(self.quality))
        return params


class CacheEntryInfo(BaseModel):
    """A file found in the cache directory."""

    filename: str = Field(..., description="Cache filename")
    path: Path = Field(..., description="Absolute path")
    size_bytes: int = Field(..., description="File size in bytes")
    modified_at: datetime = Field(..., description="Last modification time")
