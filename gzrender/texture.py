"""Image and procedural texture functions."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from os import PathLike
from pathlib import Path

from .gz import Color, RenderError

_HEADER = re.compile(rb"\s*(\S+)\s+(\d+)\s+(\d+)\s+(\d+)\s")

PROCEDURAL_SIZE = 200
PROCEDURAL_CELL = 40
PROCEDURAL_INSIDE: Color = (0.2, 0.4, 0.8)
PROCEDURAL_OUTSIDE: Color = (0.5, 0.9, 0.9)


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class ImageTexture:
    """A texture sampled from an image with bilinear interpolation."""

    def __init__(self, width: int, height: int, colors: Iterable[Sequence[float]]) -> None:
        if width < 1 or height < 1:
            raise ValueError("texture dimensions must be positive")
        self.width = width
        self.height = height
        self.colors: list[Color] = []
        for color in colors:
            red, green, blue = color
            self.colors.append((float(red), float(green), float(blue)))
        if len(self.colors) != width * height:
            raise ValueError(
                f"expected {width * height} colours, got {len(self.colors)}"
            )

    @classmethod
    def load(cls, path: str | PathLike[str]) -> ImageTexture:
        """Read a binary PPM image; channels are scaled by 1/255."""
        data = Path(path).read_bytes()
        header = _HEADER.match(data)
        if header is None:
            raise RenderError(f"{path}: not a texture image")
        width, height = int(header.group(2)), int(header.group(3))
        if width < 1 or height < 1:
            raise RenderError(f"{path}: bad texture size {width}x{height}")
        start = header.end()
        pixels = data[start : start + width * height * 3]
        if len(pixels) < width * height * 3:
            raise RenderError(f"{path}: texture data is truncated")
        channels = iter(pixels)
        colors = [(r / 255, g / 255, b / 255) for r, g, b in zip(channels, channels, channels)]
        return cls(width, height, colors)

    def _at(self, x: int, y: int) -> Color:
        return self.colors[y * self.width + x]

    def __call__(self, u: float, v: float) -> Color:
        """Sample the texture at (u, v); coordinates are clamped to [0, 1]."""
        su = _clamp(u) * (self.width - 1)
        sv = _clamp(v) * (self.height - 1)
        x0, x1 = math.floor(su), math.ceil(su)
        y0, y1 = math.floor(sv), math.ceil(sv)
        s = su - x0
        t = sv - y0
        corner_a = self._at(x0, y0)
        corner_b = self._at(x1, y0)
        corner_c = self._at(x1, y1)
        corner_d = self._at(x0, y1)
        red, green, blue = (
            s * t * c + (1.0 - s) * t * d + s * (1.0 - t) * b + (1.0 - s) * (1.0 - t) * a
            for a, b, c, d in zip(corner_a, corner_b, corner_c, corner_d)
        )
        return (red, green, blue)


def procedural_texture(u: float, v: float) -> Color:
    """A pattern of circles on a square grid."""
    half = PROCEDURAL_CELL // 2
    raw_u = math.floor(_clamp(u) * (PROCEDURAL_SIZE - 1) + 0.5)
    raw_v = math.floor(_clamp(v) * (PROCEDURAL_SIZE - 1) + 0.5)
    centre_u = raw_u - raw_u % PROCEDURAL_CELL + half
    centre_v = raw_v - raw_v % PROCEDURAL_CELL + half
    if (centre_u - raw_u) ** 2 + (centre_v - raw_v) ** 2 < (half - 1) ** 2:
        return PROCEDURAL_INSIDE
    return PROCEDURAL_OUTSIDE