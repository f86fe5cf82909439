"""Matrix construction and the transform stack."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .gz import MATLEVELS, MAXINT, Matrix, RenderError, Vector


def _copy(matrix: Sequence[Sequence[float]]) -> Matrix:
    rows = [[float(value) for value in row] for row in matrix]
    if len(rows) != 4 or any(len(row) != 4 for row in rows):
        raise ValueError("a transform must be a 4x4 matrix")
    return rows


def multiply(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix:
    """Return the matrix product a x b."""
    columns = list(zip(*b))
    return [[sum(x * y for x, y in zip(row, column)) for column in columns] for row in a]


def _cos_sin(degree: float) -> tuple[float, float]:
    radians = math.radians(degree)
    return math.cos(radians), math.sin(radians)


def rotate_x(degree: float) -> Matrix:
    """Rotation about the x axis by the given angle in degrees."""
    c, s = _cos_sin(degree)
    return [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, c, -s, 0.0],
        [0.0, s, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ]


def rotate_y(degree: float) -> Matrix:
    """Rotation about the y axis by the given angle in degrees."""
    c, s = _cos_sin(degree)
    return [
        [c, 0.0, s, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [-s, 0.0, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ]


def rotate_z(degree: float) -> Matrix:
    """Rotation about the z axis by the given angle in degrees."""
    c, s = _cos_sin(degree)
    return [
        [c, -s, 0.0, 0.0],
        [s, c, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ]


def translation(offset: Sequence[float]) -> Matrix:
    """Translation by the given (x, y, z) offset."""
    tx, ty, tz = offset
    return [
        [1.0, 0.0, 0.0, float(tx)],
        [0.0, 1.0, 0.0, float(ty)],
        [0.0, 0.0, 1.0, float(tz)],
        [0.0, 0.0, 0.0, 1.0],
    ]


def scaling(factors: Sequence[float]) -> Matrix:
    """Scaling by the given (x, y, z) factors."""
    sx, sy, sz = factors
    return [
        [float(sx), 0.0, 0.0, 0.0],
        [0.0, float(sy), 0.0, 0.0],
        [0.0, 0.0, float(sz), 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ]


def screen_matrix(xres: int, yres: int) -> Matrix:
    """Perspective-to-screen transform for a display of the given size."""
    half_x = xres / 2.0
    half_y = yres / 2.0
    return [
        [half_x, 0.0, 0.0, half_x],
        [0.0, -half_y, 0.0, half_y],
        [0.0, 0.0, float(MAXINT), 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ]


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(x * y for x, y in zip(a, b))


def _normalize(vector: Sequence[float]) -> Vector:
    length = math.sqrt(_dot(vector, vector))
    if length == 0.0:
        raise RenderError("cannot build a camera frame from a degenerate vector")
    x, y, z = (component / length for component in vector)
    return (x, y, z)


def world_to_image(
    position: Sequence[float], lookat: Sequence[float], worldup: Sequence[float]
) -> Matrix:
    """World-to-image transform of a camera at position looking at lookat."""
    z_axis = _normalize([target - origin for target, origin in zip(lookat, position)])
    up_along_z = _dot(worldup, z_axis)
    y_axis = _normalize([up - up_along_z * zc for up, zc in zip(worldup, z_axis)])
    yx, yy, yz = y_axis
    zx, zy, zz = z_axis
    x_axis = (yy * zz - yz * zy, yz * zx - yx * zz, yx * zy - yy * zx)
    return [
        [*x_axis, -_dot(x_axis, position)],
        [*y_axis, -_dot(y_axis, position)],
        [*z_axis, -_dot(z_axis, position)],
        [0.0, 0.0, 0.0, 1.0],
    ]


def perspective(fov: float) -> Matrix:
    """Image-to-perspective transform for a field of view in degrees."""
    d = math.tan(math.radians(fov) / 2.0)
    return [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, d, 0.0],
        [0.0, 0.0, d, 1.0],
    ]


class MatrixStack:
    """A stack of accumulated transforms; each push multiplies onto the top."""

    def __init__(self, limit: int = MATLEVELS) -> None:
        if limit < 1:
            raise ValueError("stack limit must be positive")
        self.limit = limit
        self._stack: list[Matrix] = []

    def push(self, matrix: Sequence[Sequence[float]]) -> None:
        """Push matrix, composed with the current top."""
        if len(self._stack) >= self.limit:
            raise RenderError("matrix stack overflow")
        copy = _copy(matrix)
        self._stack.append(multiply(self._stack[-1], copy) if self._stack else copy)

    def pop(self) -> Matrix:
        """Remove and return the top matrix."""
        if not self._stack:
            raise RenderError("matrix stack underflow")
        return self._stack.pop()

    def top(self) -> Matrix:
        """Return a copy of the top matrix."""
        if not self._stack:
            raise RenderError("matrix stack is empty")
        return [list(row) for row in self._stack[-1]]

    def __len__(self) -> int:
        return len(self._stack)