"""Phong lighting of surface normals."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .gz import (
    DEFAULT_AMBIENT,
    DEFAULT_DIFFUSE,
    DEFAULT_SPEC,
    DEFAULT_SPECULAR,
    Color,
    Light,
)

# Eye vectors used when lighting triangle vertices and single pixels.
_VERTEX_EYE = (0.0, 0.0, -0.1)
_PIXEL_EYE = (0.0, 0.0, -1.0)


@dataclass(frozen=True)
class Material:
    """Surface reflection coefficients and specular power."""

    ambient: Color = DEFAULT_AMBIENT
    diffuse: Color = DEFAULT_DIFFUSE
    specular: Color = DEFAULT_SPECULAR
    power: float = DEFAULT_SPEC


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _intensity(
    normal: Sequence[float],
    lights: Iterable[Light],
    ambient: Light,
    material: Material,
    eye: Sequence[float],
) -> Color:
    specular = [0.0, 0.0, 0.0]
    diffuse = [0.0, 0.0, 0.0]
    n_dot_e = _dot(normal, eye)
    for light in lights:
        n_dot_l = _dot(normal, light.direction)
        if n_dot_l * n_dot_e <= 0:
            continue
        reflected = [2.0 * n_dot_l * n - l for n, l in zip(normal, light.direction)]
        length = math.sqrt(_dot(reflected, reflected))
        if length != 0.0:
            reflected = [r / length for r in reflected]
        r_dot_e = _clamp(_dot(reflected, eye))
        facing = n_dot_l if n_dot_l > 0 and n_dot_e > 0 else -n_dot_l
        highlight = r_dot_e**material.power
        for k in range(3):
            specular[k] += material.specular[k] * highlight * light.color[k]
            diffuse[k] += material.diffuse[k] * facing * light.color[k]
    red, green, blue = (
        _clamp(s + d + ka * ca)
        for s, d, ka, ca in zip(specular, diffuse, material.ambient, ambient.color)
    )
    return (red, green, blue)


def vertex_intensities(
    normals: Sequence[Sequence[float]],
    lights: Sequence[Light],
    ambient: Light,
    material: Material,
) -> list[Color]:
    """Light each vertex normal of a triangle; channels are clamped to [0, 1]."""
    return [_intensity(normal, lights, ambient, material, _VERTEX_EYE) for normal in normals]


def pixel_intensity(
    normal: Sequence[float],
    lights: Sequence[Light],
    ambient: Light,
    material: Material,
) -> Color:
    """Light a single interpolated normal; channels are clamped to [0, 1]."""
    return _intensity(normal, lights, ambient, material, _PIXEL_EYE)