"""Template-facing resize entry point.

``ResizeFilter.resize("photos/a.jpg", "800x800>,webp,80")`` returns the URL of
the cached artifact, producing it first when missing or stale.
"""

import logging
import posixpath

from resize_cache.errors import InvalidInputError
from resize_cache.models import ResizeOptions, ResolvedArtifact
from resize_cache.services.cache import ArtifactCache, Producer
from resize_cache.services.resizer import ImageResizer
from resize_cache.utils.retry import with_retries

logger = logging.getLogger(__name__)


class ResizeFilter:
    """Resolves resize requests against an ArtifactCache and records what to publish."""

    def __init__(self, cache: ArtifactCache, baseurl: str = "", retries: int = 1):
        """
        Initialize filter.

        Args:
            cache: Cache the artifacts are resolved in
            baseurl: Prefix for returned URLs
            retries: Producer attempts per regeneration (1 = no retry)
        """
        self.cache = cache
        self.baseurl = baseurl
        self.retries = retries
        # Relative paths produced by this filter, for the caller to publish
        self.static_files: list[str] = []

    def resize(self, source: str, options: str) -> str:
        """
        Resize an image through the cache.

        Args:
            source: Image path relative to the cache root, e.g. "my-image.jpg"
            options: "resize[,format[,quality]]", e.g. "800x800>,webp,80"

        Returns:
            baseurl joined with the artifact's relative path
        """
        artifact = self.resolve(source, options)
        return self.url_for(artifact.dest_path_relative)

    def resolve(self, source: str, options: str) -> ResolvedArtifact:
        if not isinstance(source, str):
            raise InvalidInputError(f"`source` must be a string - got: {type(source).__name__}")
        if not source:
            raise InvalidInputError("`source` may not be empty")
        if not isinstance(options, str):
            raise InvalidInputError(f"`options` must be a string - got: {type(options).__name__}")
        if not options:
            raise InvalidInputError("`options` may not be empty")

        resize_options = ResizeOptions.from_string(options)
        producer = self._producer(resize_options)

        artifact = self.cache.resolve(
            source,
            resize_options.to_params(),
            producer,
            forced_extension=resize_options.image_format,
        )

        if artifact.regenerated:
            details = f"using resize option: '{resize_options.resize}'"
            if resize_options.image_format:
                details += f", format: {resize_options.image_format}"
            if resize_options.quality is not None:
                details += f", quality: {resize_options.quality}"
            logger.info(f"Resizing '{source}' to '{artifact.dest_path_relative}' - {details}")

            if artifact.dest_path_relative not in self.static_files:
                self.static_files.append(artifact.dest_path_relative)

        return artifact

    def url_for(self, dest_path_relative: str) -> str:
        if not self.baseurl:
            return dest_path_relative
        return posixpath.join(self.baseurl.rstrip("/") + "/", dest_path_relative.lstrip("/"))

    def _producer(self, resize_options: ResizeOptions) -> Producer:
        resizer = ImageResizer.from_options(resize_options)
        if self.retries > 1:
            return with_retries(resizer, attempts=self.retries)
        return resizer
