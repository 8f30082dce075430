"""Exceptions raised by the resize cache.

Every failure of ``ArtifactCache.resolve`` is one of these, so callers can
catch ``ResizeCacheError`` to refuse publishing a broken reference.
"""


class ResizeCacheError(Exception):
    """Base class for all resize cache errors."""


class InvalidInputError(ResizeCacheError, ValueError):
    """Empty or malformed source path or transform parameters."""


class InvalidGeometryError(InvalidInputError):
    """Resize geometry string could not be parsed."""


class UnreadableSourceError(ResizeCacheError):
    """Source file does not exist or cannot be opened for hashing."""

    def __init__(self, source_path, reason: str | None = None):
        self.source_path = source_path
        message = f"Image at {source_path} is not readable"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DirectoryUnavailableError(ResizeCacheError):
    """Cache directory could not be created."""


class ProductionFailedError(ResizeCacheError):
    """Producer raised or did not write the artifact."""

    def __init__(self, source_path, dest_path, reason: str):
        self.source_path = source_path
        self.dest_path = dest_path
        super().__init__(f"Failed to produce '{dest_path}' from '{source_path}': {reason}")


__all__ = [
    "ResizeCacheError",
    "InvalidInputError",
    "InvalidGeometryError",
    "UnreadableSourceError",
    "DirectoryUnavailableError",
    "ProductionFailedError",
]
