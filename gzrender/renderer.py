"""The scan-line renderer: pixel buffer, transform stacks, lighting state and triangles."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Sequence
from typing import BinaryIO

from .gz import (
    BACKGROUND_PIXEL,
    MATLEVELS,
    MAX_LIGHTS,
    MAXINT,
    MAXXRES,
    MAXYRES,
    Camera,
    Color,
    Interpolation,
    Light,
    Matrix,
    Pixel,
    RenderError,
    Token,
    ctoi,
    identity_matrix,
)
from .shading import Material, pixel_intensity, vertex_intensities
from .transforms import MatrixStack, perspective, screen_matrix, world_to_image
from .triangle import Plane, bounding_box, make_edges, make_plane, sort_vertices

Texture = Callable[[float, float], Sequence[float]]

_INTENSITY_LIMIT = 4095


def _color(value: Sequence[float]) -> Color:
    red, green, blue = value
    return (float(red), float(green), float(blue))


def _light(value: Light | Sequence[Sequence[float]]) -> Light:
    if isinstance(value, Light):
        return value
    direction, color = value
    return Light(_color(direction), _color(color))


def _transform(matrix: Matrix, point: Sequence[float]) -> list[float]:
    vector = (float(point[0]), float(point[1]), float(point[2]), 1.0)
    return [sum(m * p for m, p in zip(row, vector)) for row in matrix]


def _is_axis_aligned(matrix: Sequence[Sequence[float]]) -> bool:
    return all(
        matrix[row][col] == 0 for row in range(3) for col in range(3) if row != col
    )


def _clamp_intensity(value: int) -> int:
    return min(max(value, 0), _INTENSITY_LIMIT)


class Renderer:
    """Renders lit, textured triangles into a pixel buffer of xres x yres pixels."""

    def __init__(self, xres: int, yres: int) -> None:
        if not (0 < xres <= MAXXRES and 0 < yres <= MAXYRES):
            raise ValueError(f"display size {xres}x{yres} is out of range")
        self.xres = xres
        self.yres = yres
        self.pixels: list[Pixel] = []
        self.framebuffer = bytearray(3 * xres * yres)
        self.camera = Camera()
        self.ximage = MatrixStack(MATLEVELS)
        self.xnorm = MatrixStack(MATLEVELS)
        self.xsp = screen_matrix(xres, yres)
        self.flat_color: Color = (0.0, 0.0, 0.0)
        self.interpolation = Interpolation.FLAT
        self.lights: list[Light] = []
        self.ambient_light = Light((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        self.material = Material()
        self.texture: Texture | None = None
        self.x_offset = 0.0
        self.y_offset = 0.0
        self.reset()

    def reset(self) -> None:
        """Start a new frame: fill every pixel with the background."""
        count = self.xres * self.yres
        self.pixels = [BACKGROUND_PIXEL] * count
        background = bytes(
            (
                BACKGROUND_PIXEL.blue & 0xFF,
                BACKGROUND_PIXEL.green & 0xFF,
                BACKGROUND_PIXEL.red & 0xFF,
            )
        )
        self.framebuffer = bytearray(background * count)

    def begin_render(self) -> None:
        """Derive the camera matrices and push screen, perspective and view transforms."""
        camera = self.camera
        camera.xiw = world_to_image(camera.position, camera.lookat, camera.worldup)
        camera.xpi = perspective(camera.fov)
        self.push_matrix(self.xsp)
        self.push_matrix(camera.xpi)
        self.push_matrix(camera.xiw)

    def _index(self, i: int, j: int) -> int | None:
        if 0 <= i < self.xres and 0 <= j < self.yres:
            return i + j * self.xres
        return None

    def put(self, i: int, j: int, r: int, g: int, b: int, a: int, z: int) -> None:
        """Write a pixel if it lies on screen and is nearer than what is there."""
        index = self._index(i, j)
        if index is None:
            return
        if z < self.pixels[index].z:
            self.pixels[index] = Pixel(
                _clamp_intensity(r), _clamp_intensity(g), _clamp_intensity(b), a, z
            )

    def get(self, i: int, j: int) -> Pixel:
        """Return the pixel at column i, row j."""
        index = self._index(i, j)
        if index is None:
            raise IndexError(f"pixel ({i}, {j}) is outside the display")
        return self.pixels[index]

    def _channels(self) -> Iterable[tuple[int, int, int]]:
        for pixel in self.pixels:
            yield (
                (pixel.red >> 4) & 0xFF,
                (pixel.green >> 4) & 0xFF,
                (pixel.blue >> 4) & 0xFF,
            )

    def flush_to_ppm(self, stream: BinaryIO) -> None:
        """Write the image to a binary stream as a P6 PPM file."""
        stream.write(f"P6 {self.xres} {self.yres} 255\n".encode("ascii"))
        stream.write(bytes(value for rgb in self._channels() for value in rgb))

    def flush_to_framebuffer(self) -> bytes:
        """Copy the image into the framebuffer in blue, green, red order and return it."""
        self.framebuffer = bytearray(
            value for red, green, blue in self._channels() for value in (blue, green, red)
        )
        return bytes(self.framebuffer)

    def put_attributes(self, attributes: Iterable[tuple[int, object]]) -> None:
        """Set renderer state from (token, value) pairs; unknown tokens are ignored.

        An x anti-aliasing shift also sets the y shift; a y shift given after it wins.
        """
        for token, value in attributes:
            if token == Token.RGB_COLOR:
                self.flat_color = _color(value)  # type: ignore[arg-type]
            elif token == Token.INTERPOLATE:
                self.interpolation = Interpolation(value)
            elif token == Token.DIRECTIONAL_LIGHT:
                if len(self.lights) >= MAX_LIGHTS:
                    raise RenderError(f"at most {MAX_LIGHTS} lights are allowed")
                self.lights.append(_light(value))  # type: ignore[arg-type]
            elif token == Token.AMBIENT_LIGHT:
                self.ambient_light = _light(value)  # type: ignore[arg-type]
            elif token == Token.AMBIENT_COEFFICIENT:
                self.material = dataclasses.replace(self.material, ambient=_color(value))  # type: ignore[arg-type]
            elif token == Token.DIFFUSE_COEFFICIENT:
                self.material = dataclasses.replace(self.material, diffuse=_color(value))  # type: ignore[arg-type]
            elif token == Token.SPECULAR_COEFFICIENT:
                self.material = dataclasses.replace(self.material, specular=_color(value))  # type: ignore[arg-type]
            elif token == Token.DISTRIBUTION_COEFFICIENT:
                self.material = dataclasses.replace(self.material, power=float(value))  # type: ignore[arg-type]
            elif token == Token.TEXTURE_MAP:
                self.texture = value  # type: ignore[assignment]
            elif token == Token.AASHIFTX:
                self.x_offset = float(value)  # type: ignore[arg-type]
                self.y_offset = float(value)  # type: ignore[arg-type]
            elif token == Token.AASHIFTY:
                self.y_offset = float(value)  # type: ignore[arg-type]

    def put_camera(self, camera: Camera) -> None:
        """Replace the renderer's camera with a copy of the given one."""
        self.camera = dataclasses.replace(
            camera,
            position=_color(camera.position),
            lookat=_color(camera.lookat),
            worldup=_color(camera.worldup),
            xiw=[list(row) for row in camera.xiw],
            xpi=[list(row) for row in camera.xpi],
        )

    def push_matrix(self, matrix: Sequence[Sequence[float]]) -> None:
        """Push a transform onto the image stack and its counterpart onto the normal stack."""
        self.ximage.push(matrix)
        depth = len(self.xnorm)
        if depth < 3:
            self.xnorm.push(identity_matrix())
        elif depth == 3:
            rotation = [list(row) for row in self.camera.xiw]
            for row in rotation[:3]:
                row[3] = 0.0
            self.xnorm.push(rotation)
        elif _is_axis_aligned(matrix):
            self.xnorm.push(identity_matrix())
        else:
            self.xnorm.push(matrix)

    def pop_matrix(self) -> Matrix:
        """Remove and return the top of the image stack."""
        return self.ximage.pop()

    def _sample(self, u_plane: Plane, v_plane: Plane, i: int, j: int, depth: int) -> Color:
        assert self.texture is not None
        scale = depth / (float(MAXINT) - depth) + 1.0
        color = self.texture(u_plane.value_at(i, j) * scale, v_plane.value_at(i, j) * scale)
        return _color(color)

    def put_triangle(
        self,
        vertices: Sequence[Sequence[float]],
        normals: Sequence[Sequence[float]],
        uvs: Sequence[Sequence[float]],
    ) -> None:
        """Transform, light and rasterize one triangle given in model space."""
        image = self.ximage.top()
        norm = self.xnorm.top()
        transformed = [_transform(image, vertex) for vertex in vertices]
        if any(point[2] < 0 for point in transformed):
            return
        transformed_normals = [_transform(norm, normal) for normal in normals]
        screen = [
            (x / w - self.x_offset, y / w - self.y_offset, z / w)
            for x, y, z, w in transformed
        ]
        unsorted_normals = [(x / w, y / w, z / w) for x, y, z, w in transformed_normals]

        points, sorted_normals, sorted_uvs = sort_vertices(screen, unsorted_normals, uvs)
        edges = make_edges(points)

        final = vertex_intensities(sorted_normals, self.lights, self.ambient_light, self.material)
        flat = vertex_intensities(unsorted_normals, self.lights, self.ambient_light, self.material)

        depth_plane = make_plane(points, [p[2] for p in points])
        color_planes = [make_plane(points, [c[k] for c in final]) for k in range(3)]
        normal_planes = [make_plane(points, [n[k] for n in sorted_normals]) for k in range(3)]

        perspective_uvs = []
        for point, (u, v) in zip(points, sorted_uvs):
            factor = point[2] / (float(MAXINT) - point[2]) + 1.0
            perspective_uvs.append((u / factor, v / factor))
        u_plane = make_plane(points, [uv[0] for uv in perspective_uvs])
        v_plane = make_plane(points, [uv[1] for uv in perspective_uvs])

        color_c = color_planes[0].c * color_planes[1].c * color_planes[2].c
        normal_c = normal_planes[0].c * normal_planes[1].c * normal_planes[2].c
        min_x, min_y, max_x, max_y = bounding_box(points)

        for i in range(min_x, max_x + 1):
            for j in range(min_y, max_y + 1):
                e12, e23, e31 = (edge.value_at(i, j) for edge in edges)
                inside = (
                    depth_plane.c != 0
                    and ((e12 > 0 and e23 > 0 and e31 > 0) or (e12 < 0 and e23 < 0 and e31 < 0))
                ) or (
                    (e12 == 0 or e23 == 0 or e31 == 0) and color_c != 0 and normal_c != 0
                )
                if not inside:
                    continue
                depth = int(depth_plane.value_at(i, j) + 0.5)
                red = green = blue = 0
                if self.interpolation == Interpolation.FLAT:
                    red, green, blue = (ctoi(c) for c in flat[0])
                elif self.interpolation == Interpolation.COLOR:
                    intensity = [plane.value_at(i, j) for plane in color_planes]
                    if self.texture is not None:
                        tex = self._sample(u_plane, v_plane, i, j, depth)
                        intensity = [c * t for c, t in zip(intensity, tex)]
                    red, green, blue = (ctoi(c) for c in intensity)
                elif self.interpolation == Interpolation.NORMALS:
                    normal = [plane.value_at(i, j) for plane in normal_planes]
                    if self.texture is not None:
                        tex = self._sample(u_plane, v_plane, i, j, depth)
                        self.material = dataclasses.replace(
                            self.material, diffuse=tex, ambient=tex
                        )
                    intensity = pixel_intensity(
                        normal, self.lights, self.ambient_light, self.material
                    )
                    red, green, blue = (ctoi(c) for c in intensity)
                self.put(i, j, red, green, blue, 1, depth)