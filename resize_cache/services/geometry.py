"""ImageMagick-style resize geometry ("800x800>", "50%", "x300^")."""

import re
from dataclasses import dataclass
from typing import Literal

from resize_cache.errors import InvalidGeometryError

GeometryFlag = Literal["", ">", "<", "!", "^"]

_GEOMETRY_RE = re.compile(
    r"^\s*(?:(?P<percent>\d+(?:\.\d+)?)%|(?P<width>\d*)(?:\s*x\s*(?P<height>\d*))?)\s*(?P<flag>[<>!^]?)\s*$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Geometry:
    """Parsed resize geometry."""

    width: int | None = None
    height: int | None = None
    percent: float | None = None
    flag: GeometryFlag = ""  # ">" shrink only, "<" enlarge only, "!" exact, "^" fill

    def target_size(self, width: int, height: int) -> tuple[int, int]:
        """Output size for an image of the given size."""
        if self.percent is not None:
            scale_x = scale_y = self.percent / 100
        elif self.flag == "!" and self.width and self.height:
            scale_x = self.width / width
            scale_y = self.height / height
        else:
            scales = []
            if self.width:
                scales.append(self.width / width)
            if self.height:
                scales.append(self.height / height)
            scale_x = scale_y = max(scales) if self.flag == "^" else min(scales)

        # Shrink/enlarge-only geometries leave the image alone otherwise
        if self.flag == ">" and scale_x >= 1 and scale_y >= 1:
            return width, height
        if self.flag == "<" and scale_x <= 1 and scale_y <= 1:
            return width, height

        return max(1, round(width * scale_x)), max(1, round(height * scale_y))


def parse_geometry(spec: str) -> Geometry:
    """
    Parse a geometry string.

    Supported forms: ``WxH``, ``W``, ``xH``, ``N%``, each with an optional
    trailing flag (``>``, ``<``, ``!``, ``^``).

    Raises:
        InvalidGeometryError: If the string is not a recognised geometry
    """
    match = _GEOMETRY_RE.match(spec or "")
    if not match:
        raise InvalidGeometryError(f"Invalid resize geometry: {spec!r}")

    flag = match.group("flag")
    if match.group("percent") is not None:
        percent = float(match.group("percent"))
        if percent <= 0:
            raise InvalidGeometryError(f"Resize percentage must be positive: {spec!r}")
        return Geometry(percent=percent, flag=flag)

    width = int(match.group("width")) if match.group("width") else None
    height = int(match.group("height")) if match.group("height") else None
    if not width and not height:
        raise InvalidGeometryError(f"Resize geometry needs a width or height: {spec!r}")

    return Geometry(width=width, height=height, flag=flag)
