"""The anti-aliased teapot scene: set-up, rendering and user transforms."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from collections.abc import Callable, Iterator, Sequence
from os import PathLike
from typing import TextIO

from .gz import AAKERNEL_SIZE, Camera, Interpolation, Light, RenderError, Token
from .renderer import Renderer
from .texture import ImageTexture, procedural_texture
from .transforms import rotate_x, rotate_y, rotate_z, scaling, translation

Texture = Callable[[float, float], Sequence[float]]
Triangle = tuple[
    list[tuple[float, float, float]],
    list[tuple[float, float, float]],
    list[tuple[float, float]],
]

INFILE = "ppot.asc"
OUTFILE = "output.ppm"
TEXTURE_FILE = "texture"

# X shift, Y shift and weight of each anti-aliasing sample.
AA_FILTER: tuple[tuple[float, float, float], ...] = (
    (-0.52, 0.38, 0.128),
    (0.41, 0.56, 0.119),
    (0.27, 0.08, 0.294),
    (-0.17, -0.29, 0.249),
    (0.58, -0.55, 0.104),
    (-0.31, -0.71, 0.106),
)

SCENE_CAMERA = Camera(
    position=(-3.0, -25.0, -4.0),
    lookat=(7.8, 0.7, 6.5),
    worldup=(-0.2, 1.0, 0.0),
    fov=63.7,
)

SCENE_LIGHTS = (
    Light((-0.7071, 0.7071, 0.0), (0.5, 0.5, 0.9)),
    Light((0.0, -0.7071, -0.7071), (0.9, 0.2, 0.3)),
    Light((0.7071, 0.0, -0.7071), (0.2, 0.7, 0.3)),
)
SCENE_AMBIENT = Light((0.0, 0.0, 0.0), (0.3, 0.3, 0.3))
SCENE_SPECULAR = (0.3, 0.3, 0.3)
SCENE_AMBIENT_COEFFICIENT = (0.1, 0.1, 0.1)
SCENE_DIFFUSE = (0.7, 0.7, 0.7)
SCENE_SPEC_POWER = 32.0

MODEL_SCALE = [
    [3.25, 0.0, 0.0, 0.0],
    [0.0, 3.25, 0.0, -3.25],
    [0.0, 0.0, 3.25, 3.5],
    [0.0, 0.0, 0.0, 1.0],
]
MODEL_ROTATE_X = [
    [1.0, 0.0, 0.0, 0.0],
    [0.0, 0.7071, 0.7071, 0.0],
    [0.0, -0.7071, 0.7071, 0.0],
    [0.0, 0.0, 0.0, 1.0],
]
MODEL_ROTATE_Y = [
    [0.866, 0.0, -0.5, 0.0],
    [0.0, 1.0, 0.0, 0.0],
    [0.5, 0.0, 0.866, 0.0],
    [0.0, 0.0, 0.0, 1.0],
]

_FLOATS_PER_TRIANGLE = 24


def read_triangles(stream: TextIO) -> Iterator[Triangle]:
    """Yield (vertices, normals, uvs) for each triangle of a model file.

    Each triangle is a word followed by three vertices of eight numbers:
    position x y z, normal x y z and texture u v.
    """
    words = stream.read().split()
    position = 0
    while position < len(words):
        values = words[position + 1 : position + 1 + _FLOATS_PER_TRIANGLE]
        if len(values) < _FLOATS_PER_TRIANGLE:
            raise ValueError("model file ends in the middle of a triangle")
        numbers = [float(value) for value in values]
        vertices, normals, uvs = [], [], []
        for start in range(0, _FLOATS_PER_TRIANGLE, 8):
            x, y, z, nx, ny, nz, u, v = numbers[start : start + 8]
            vertices.append((x, y, z))
            normals.append((nx, ny, nz))
            uvs.append((u, v))
        yield vertices, normals, uvs
        position += 1 + _FLOATS_PER_TRIANGLE


def combine_samples(
    renderers: Sequence[Renderer], weights: Sequence[float]
) -> list[tuple[int, int, int]]:
    """Weighted sum of the renderers' pixels, truncated to integer intensities."""
    if not renderers:
        raise ValueError("no samples to combine")
    if len(renderers) != len(weights):
        raise ValueError("each sample needs exactly one weight")
    size = len(renderers[0].pixels)
    if any(len(renderer.pixels) != size for renderer in renderers):
        raise ValueError("samples differ in size")
    combined = []
    for samples in zip(*(renderer.pixels for renderer in renderers)):
        red = green = blue = 0.0
        for pixel, weight in zip(samples, weights):
            red += pixel.red * weight
            green += pixel.green * weight
            blue += pixel.blue * weight
        combined.append((int(red), int(green), int(blue)))
    return combined


class Application:
    """Renders the scene once per anti-aliasing shift and blends the results."""

    def __init__(self, width: int = 256, height: int = 256, texture: Texture | None = None) -> None:
        self.width = width
        self.height = height
        self.texture = texture
        self.renderers: list[Renderer] = []
        self.framebuffer: bytes = b""

    @property
    def display(self) -> Renderer:
        """The renderer that holds the blended image."""
        if not self.renderers:
            raise RenderError("application is not initialized")
        return self.renderers[-1]

    def initialize(self) -> None:
        """Create one renderer per sample plus one for the result and set up the scene."""
        shifts = [(x, y) for x, y, _ in AA_FILTER] + [(0.0, 0.0)]
        renderers = []
        for x_offset, y_offset in shifts:
            renderer = Renderer(self.width, self.height)
            renderer.put_camera(SCENE_CAMERA)
            renderer.begin_render()
            renderer.put_attributes((Token.DIRECTIONAL_LIGHT, light) for light in SCENE_LIGHTS)
            renderer.put_attributes([(Token.AMBIENT_LIGHT, SCENE_AMBIENT)])
            renderer.put_attributes(
                [
                    (Token.DIFFUSE_COEFFICIENT, SCENE_DIFFUSE),
                    (Token.INTERPOLATE, Interpolation.NORMALS),
                    (Token.AMBIENT_COEFFICIENT, SCENE_AMBIENT_COEFFICIENT),
                    (Token.SPECULAR_COEFFICIENT, SCENE_SPECULAR),
                    (Token.DISTRIBUTION_COEFFICIENT, SCENE_SPEC_POWER),
                    (Token.TEXTURE_MAP, self.texture),
                ]
            )
            renderer.put_attributes([(Token.AASHIFTX, x_offset), (Token.AASHIFTY, y_offset)])
            renderer.push_matrix(MODEL_SCALE)
            renderer.push_matrix(MODEL_ROTATE_Y)
            renderer.push_matrix(MODEL_ROTATE_X)
            renderers.append(renderer)
        self.renderers = renderers
        self.framebuffer = bytes(renderers[-1].framebuffer)

    def render(
        self,
        model_path: str | PathLike[str] = INFILE,
        output_path: str | PathLike[str] = OUTFILE,
    ) -> bytes:
        """Render the model, write the blended image as PPM and return the framebuffer."""
        display = self.display
        for renderer in self.renderers:
            renderer.reset()
            with open(model_path, encoding="ascii") as model:
                for vertices, normals, uvs in read_triangles(model):
                    renderer.put_triangle(vertices, normals, uvs)

        weights = [weight for _, _, weight in AA_FILTER]
        blended = combine_samples(self.renderers[:AAKERNEL_SIZE], weights)
        display.pixels = [
            dataclasses.replace(pixel, red=red, green=green, blue=blue)
            for pixel, (red, green, blue) in zip(display.pixels, blended)
        ]

        with open(output_path, "wb") as output:
            display.flush_to_ppm(output)
        self.framebuffer = display.flush_to_framebuffer()
        return self.framebuffer

    def _push_all(self, matrix: Sequence[Sequence[float]]) -> None:
        if not self.renderers:
            raise RenderError("application is not initialized")
        for renderer in self.renderers:
            renderer.push_matrix(matrix)

    def rotate(self, axis: int, degree: float) -> None:
        """Rotate the model about axis 0 (x), 1 (y) or 2 (z) by degrees in [-360, 360]."""
        builders = {0: rotate_x, 1: rotate_y, 2: rotate_z}
        if axis not in builders:
            raise ValueError(f"axis must be 0, 1 or 2, not {axis}")
        if not -360.0 <= degree <= 360.0:
            raise ValueError("rotation must lie between -360 and 360 degrees")
        self._push_all(builders[axis](degree))

    def translate(self, offset: Sequence[float]) -> None:
        """Move the model by an (x, y, z) offset."""
        self._push_all(translation(offset))

    def scale(self, factors: Sequence[float]) -> None:
        """Scale the model by (x, y, z) factors."""
        self._push_all(scaling(factors))


def main(argv: Sequence[str] | None = None) -> int:
    """Render a model file to a PPM image."""
    parser = argparse.ArgumentParser(description="Render an anti-aliased, textured model.")
    parser.add_argument("--model", default=INFILE, help="triangle model file")
    parser.add_argument("--output", default=OUTFILE, help="PPM file to write")
    parser.add_argument("--texture", default=TEXTURE_FILE, help="PPM texture image")
    parser.add_argument(
        "--procedural", action="store_true", help="use the procedural texture instead of an image"
    )
    parser.add_argument("--width", type=int, default=256)
    parser.add_argument("--height", type=int, default=256)
    args = parser.parse_args(argv)

    try:
        texture: Texture = (
            procedural_texture if args.procedural else ImageTexture.load(args.texture)
        )
        application = Application(args.width, args.height, texture)
        application.initialize()
        application.render(args.model, args.output)
    except (OSError, ValueError, RenderError) as error:
        print(error, file=sys.stderr)
        return 1
    return 0