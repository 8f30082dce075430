"""Pillow producer: auto-orient, resize, strip metadata, convert format.

Instances are producers for ArtifactCache.resolve:
``producer(source_path, transform_params, dest_path)``.
"""

from pathlib import Path
from typing import Sequence

from loguru import logger
from PIL import Image, ImageOps

from resize_cache.constants import QUALITY_MAX, QUALITY_MIN
from resize_cache.errors import InvalidInputError
from resize_cache.models import ResizeOptions
from resize_cache.services.geometry import parse_geometry

# Modes JPEG can store directly
_JPEG_MODES = {"RGB", "L", "CMYK"}


def pillow_format(image_format: str) -> str:
    """Map an extension-style format ("jpg", ".webp") to Pillow's name."""
    ext = image_format.lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    try:
        return Image.registered_extensions()[ext]
    except KeyError:
        raise InvalidInputError(f"Unsupported image format: {image_format!r}") from None


class ImageResizer:
    """Resize producer configured from a resize option, format and quality."""

    def __init__(self, resize: str, image_format: str | None = None, quality: int | None = None):
        """
        Initialize resizer.

        Args:
            resize: Geometry string, e.g. "800x800>"
            image_format: Output format as an extension (e.g. "webp"), or None to keep the source's
            quality: Encoder quality 1-100; other values are ignored

        Raises:
            InvalidGeometryError: If resize is not a valid geometry
            InvalidInputError: If image_format is not supported by Pillow
        """
        self.resize = resize
        self.geometry = parse_geometry(resize)
        self.image_format = image_format or None
        self.format_name = pillow_format(image_format) if image_format else None

        if quality is not None and not QUALITY_MIN <= quality <= QUALITY_MAX:
            logger.bind(quality=quality).warning("Ignoring out-of-range image quality")
            quality = None
        self.quality = quality

    @classmethod
    def from_options(cls, options: ResizeOptions) -> "ImageResizer":
        return cls(options.resize, options.image_format, options.quality)

    @classmethod
    def from_params(cls, transform_params: Sequence[str]) -> "ImageResizer":
        """Build from ``[resize, format?, quality?]`` transform params."""
        return cls.from_options(ResizeOptions.from_string(",".join(transform_params)))

    def __call__(self, source_path: Path, transform_params: Sequence[str], dest_path: Path) -> None:
        self.process(source_path, dest_path)

    def process(self, source_path: str | Path, dest_path: str | Path) -> None:
        """Read, process, and write out as a new image."""
        dest_path = Path(dest_path)

        with Image.open(source_path) as image:
            source_format = image.format
            image = ImageOps.exif_transpose(image)

            target = self.geometry.target_size(*image.size)
            if target != image.size:
                image = image.resize(target, Image.Resampling.LANCZOS)

            # Drop EXIF, ICC and text chunks
            image.info = {}

            format_name = self.format_name or self._format_for(dest_path, source_format)
            if format_name == "JPEG" and image.mode not in _JPEG_MODES:
                image = image.convert("RGB")

            save_kwargs = {"format": format_name}
            if self.quality is not None:
                save_kwargs["quality"] = self.quality

            image.save(dest_path, **save_kwargs)

        logger.bind(
            source=str(source_path),
            size=f"{target[0]}x{target[1]}",
            format=format_name,
        ).debug("Image written")

    @staticmethod
    def _format_for(dest_path: Path, source_format: str | None) -> str:
        if source_format:
            return source_format
        return pillow_format(dest_path.suffix)


def resize_image(source_path: Path, transform_params: Sequence[str], dest_path: Path) -> None:
    """Producer that reads its configuration from the transform params."""
    ImageResizer.from_params(transform_params)(source_path, transform_params, dest_path)
