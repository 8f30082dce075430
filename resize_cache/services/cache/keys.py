"""
Content-addressed cache filenames.

A filename is ``{short_hash}_{slug}{ext}``: the short hash covers the source
file's bytes only, so renaming or touching a source never changes its key.
"""

import hashlib
import re
from pathlib import Path
from typing import Sequence

from resize_cache.constants import HASH_CHUNK_SIZE, HASH_LENGTH, PARAM_SEPARATOR
from resize_cache.errors import InvalidInputError, UnreadableSourceError

_NON_ALNUM = re.compile(r"[^\da-z]+", re.IGNORECASE | re.ASCII)


def hash_file(source_path: str | Path) -> str:
    """
    Compute the SHA-256 hex digest of a file's content.

    Args:
        source_path: File to hash

    Returns:
        Full 64-character hex digest

    Raises:
        UnreadableSourceError: If the file cannot be opened or read
    """
    sha256 = hashlib.sha256()
    try:
        with open(source_path, "rb") as f:
            while chunk := f.read(HASH_CHUNK_SIZE):
                sha256.update(chunk)
    except OSError as e:
        raise UnreadableSourceError(source_path, e.strerror or str(e)) from e
    return sha256.hexdigest()


def slugify(transform_params: Sequence[str]) -> str:
    """Join params and drop everything that is not an ASCII letter or digit."""
    return _NON_ALNUM.sub("", PARAM_SEPARATOR.join(transform_params))


def resolve_extension(source_path: str | Path, forced_extension: str | None = None) -> str:
    """Forced extension if given, else the source's own (with its dot)."""
    if forced_extension:
        return forced_extension if forced_extension.startswith(".") else f".{forced_extension}"
    return Path(source_path).suffix


class KeyDeriver:
    """Derives stable cache filenames from source content and transform params."""

    def __init__(self, hash_length: int = HASH_LENGTH):
        """
        Initialize key deriver.

        Args:
            hash_length: Hex characters kept from the digest (32 = 128 bits)
        """
        self.hash_length = hash_length

    def short_hash(self, source_path: str | Path) -> str:
        """Truncated content digest used as the key prefix."""
        return hash_file(source_path)[: self.hash_length]

    def derive_filename(
        self,
        source_path: str | Path,
        transform_params: Sequence[str],
        forced_extension: str | None = None,
    ) -> str:
        """
        Build the cache filename for a (content, params) pair.

        Params that differ only by punctuation produce the same slug and
        therefore the same filename.

        Args:
            source_path: Readable source file
            transform_params: Non-empty ordered sequence of strings
            forced_extension: Output extension override (e.g. "webp")

        Returns:
            Filename like ``"<32 hex>_800x800webp80.webp"``

        Raises:
            InvalidInputError: If transform_params is empty
            UnreadableSourceError: If the source cannot be hashed
        """
        if not transform_params:
            raise InvalidInputError("`transform_params` may not be empty")

        short_hash = self.short_hash(source_path)
        slug = slugify(transform_params)
        ext = resolve_extension(source_path, forced_extension)

        return f"{short_hash}_{slug}{ext}"
