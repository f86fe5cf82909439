"""Triangle set-up: vertex ordering, edge equations and interpolation planes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

Vertex = tuple[float, float, float]
UV = tuple[float, float]


def _round(value: float) -> int:
    return int(value + 0.5)


def sort_vertices(
    vertices: Sequence[Sequence[float]],
    normals: Sequence[Sequence[float]],
    uvs: Sequence[Sequence[float]],
) -> tuple[list[Vertex], list[Vertex], list[UV]]:
    """Order a screen-space triangle by y and fix the winding of the last two.

    Normals and texture coordinates are reordered along with their vertices.
    """
    if not len(vertices) == len(normals) == len(uvs) == 3:
        raise ValueError("a triangle needs exactly three vertices, normals and uvs")
    items = [
        (
            (float(v[0]), float(v[1]), float(v[2])),
            (float(n[0]), float(n[1]), float(n[2])),
            (float(t[0]), float(t[1])),
        )
        for v, n, t in zip(vertices, normals, uvs)
    ]

    def swap(i: int, j: int) -> None:
        items[i], items[j] = items[j], items[i]

    def pos(k: int) -> Vertex:
        return items[k][0]

    if pos(0)[1] > pos(1)[1]:
        swap(0, 1)
    if pos(0)[1] > pos(2)[1]:
        swap(0, 2)
    if pos(1)[1] > pos(2)[1]:
        swap(1, 2)

    v0, v1, v2 = pos(0), pos(1), pos(2)
    if _round(v0[1]) == _round(v1[1]):
        if v0[0] > v1[0]:
            swap(1, 2)
    elif _round(v1[1]) == _round(v2[1]):
        if v2[0] > v1[0]:
            swap(1, 2)
    else:
        if _round(v0[0]) == _round(v2[0]):
            mid_x = v0[0]
        else:
            slope = (v0[1] - v2[1]) / (v0[0] - v2[0])
            mid_x = (v1[1] - v0[1]) / slope + v0[0]
        if mid_x > v1[0]:
            swap(1, 2)

    return (
        [item[0] for item in items],
        [item[1] for item in items],
        [item[2] for item in items],
    )


@dataclass(frozen=True)
class Plane:
    """A plane a*x + b*y + c*value + d = 0 over screen coordinates."""

    a: float
    b: float
    c: float
    d: float

    def value_at(self, x: float, y: float) -> float:
        """Interpolated value at screen point (x, y); c must be non-zero."""
        return -(self.a * x + self.b * y + self.d) / self.c


def make_plane(vertices: Sequence[Sequence[float]], values: Sequence[float]) -> Plane:
    """Plane through the three points (x, y, value) of a triangle."""
    (x0, y0, *_), (x1, y1, *_), (x2, y2, *_) = vertices
    z0, z1, z2 = values
    dx1, dy1, dz1 = x1 - x0, y1 - y0, z1 - z0
    dx2, dy2, dz2 = x2 - x0, y2 - y0, z2 - z0
    a = dy1 * dz2 - dy2 * dz1
    b = -(dx1 * dz2 - dx2 * dz1)
    c = dx1 * dy2 - dy1 * dx2
    d = -(a * x0 + b * y0 + c * z0)
    return Plane(a, b, c, d)


@dataclass(frozen=True)
class Edge:
    """An edge equation a*x + b*y + c; zero on the line through the edge."""

    a: float
    b: float
    c: float

    def value_at(self, x: float, y: float) -> float:
        """Signed distance-like value of (x, y) relative to the edge."""
        return self.a * x + self.b * y + self.c


def _edge(start: Sequence[float], end: Sequence[float]) -> Edge:
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    return Edge(dy, -dx, dx * start[1] - dy * start[0])


def make_edges(vertices: Sequence[Sequence[float]]) -> tuple[Edge, Edge, Edge]:
    """Edge equations for edges 1-2, 2-3 and 3-1."""
    v0, v1, v2 = vertices
    return (_edge(v0, v1), _edge(v1, v2), _edge(v2, v0))


def bounding_box(vertices: Sequence[Sequence[float]]) -> tuple[int, int, int, int]:
    """Pixel bounds (min_x, min_y, max_x, max_y) of a triangle, rounded half up."""
    xs = [v[0] for v in vertices]
    ys = [v[1] for v in vertices]
    return (_round(min(xs)), _round(min(ys)), _round(max(xs)), _round(max(ys)))