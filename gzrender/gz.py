"""Core types, tokens and constants shared by the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

Vector = tuple[float, float, float]
Color = tuple[float, float, float]
Matrix = list[list[float]]

MAXINT = 0x7FFFFFFF
MAXXRES = 1024
MAXYRES = 1024
AAKERNEL_SIZE = 6

MATLEVELS = 100
MAX_LIGHTS = 10

DEFAULT_FOV = 35.0
DEFAULT_IM_X = -10.0
DEFAULT_IM_Y = 5.0
DEFAULT_IM_Z = -10.0

DEFAULT_AMBIENT: Color = (0.1, 0.1, 0.1)
DEFAULT_DIFFUSE: Color = (0.7, 0.6, 0.5)
DEFAULT_SPECULAR: Color = (0.2, 0.3, 0.4)
DEFAULT_SPEC = 32.0

INTENSITY_MAX = (1 << 12) - 1


class RenderError(Exception):
    """Raised when the renderer cannot carry out a request."""


class Token(IntEnum):
    """Names of triangle parts and renderer attributes."""

    NULL_TOKEN = 0
    POSITION = 1
    NORMAL = 2
    TEXTURE_INDEX = 3
    AASHIFTX = 44
    AASHIFTY = 45
    AMBIENT_LIGHT = 78
    DIRECTIONAL_LIGHT = 79
    INTERPOLATE = 95
    RGB_COLOR = 99
    AMBIENT_COEFFICIENT = 1001
    DIFFUSE_COEFFICIENT = 1002
    SPECULAR_COEFFICIENT = 1003
    DISTRIBUTION_COEFFICIENT = 1004
    TEXTURE_MAP = 1010


class Interpolation(IntEnum):
    """Shading interpolation modes."""

    FLAT = 0
    COLOR = 1
    NORMALS = 2


def identity_matrix() -> Matrix:
    """Return a fresh 4x4 identity matrix."""
    return [[1.0 if row == col else 0.0 for col in range(4)] for row in range(4)]


def ctoi(color: float) -> int:
    """Convert a colour in [0, 1] to a 12-bit intensity, as a signed 16-bit value."""
    value = int(color * INTENSITY_MAX) & 0xFFFF
    return value - 0x10000 if value >= 0x8000 else value


@dataclass
class Camera:
    """A camera: placement, view direction and the matrices derived from them."""

    position: Vector = (DEFAULT_IM_X, DEFAULT_IM_Y, DEFAULT_IM_Z)
    lookat: Vector = (0.0, 0.0, 0.0)
    worldup: Vector = (0.0, 1.0, 0.0)
    fov: float = DEFAULT_FOV
    xiw: Matrix = field(default_factory=identity_matrix)
    xpi: Matrix = field(default_factory=identity_matrix)


@dataclass(frozen=True)
class Light:
    """A light: direction from surface to light, and its colour."""

    direction: Vector
    color: Color


@dataclass(frozen=True)
class Pixel:
    """One pixel of the pixel buffer: 12-bit colour channels, alpha and depth."""

    red: int
    green: int
    blue: int
    alpha: int
    z: int


BACKGROUND_PIXEL = Pixel(2055, 1798, 1514, 1, MAXINT)