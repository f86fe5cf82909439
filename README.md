# gzrender

A small software renderer written in plain Python with no third-party
dependencies. It reads a triangle model in a simple ASCII format, moves it
through a camera and a matrix stack, and scan-converts each triangle into a
pixel buffer with a z-buffer. Triangles are lit by directional lights and one
ambient light, with flat, Gouraud or Phong interpolation, and can be textured
by an image or a procedural pattern. The result is written as a binary PPM
image.

Antialiasing is done by rendering the scene once for each of six sub-pixel
screen shifts and blending those images with fixed weights.

## Installing

```
pip install .
```

## Command line

```
gzrender
```

With no options this reads the model `ppot.asc` and the texture image
`texture` (a binary PPM file) from the current directory, renders a 256 x 256
image and writes it to `output.ppm`.

Options:

- `--model PATH`: the triangle model file (default `ppot.asc`)
- `--output PATH`: the PPM file to write (default `output.ppm`)
- `--texture PATH`: the PPM texture image (default `texture`)
- `--procedural`: use the procedural circle pattern instead of a texture image
- `--width N`, `--height N`: image size in pixels (default 256 each, at most 1024)

On a missing or malformed file the command prints the error to standard error
and exits with status 1.

## Model format

A model file is a sequence of triangles separated by whitespace. Each triangle
starts with one word (for example `triangle`), followed by three vertices of
eight numbers each:

```
x y z  nx ny nz  u v
```

that is position, normal and texture coordinates. A file that ends in the
middle of a triangle raises `ValueError`.

## Using the library

```python
from gzrender.application import Application
from gzrender.texture import ImageTexture, procedural_texture

app = Application(256, 256, procedural_texture)
app.initialize()
app.rotate(1, 30.0)              # 30 degrees about the y axis (0 = x, 1 = y, 2 = z)
app.translate((0.0, 0.5, 0.0))
app.scale((1.2, 1.2, 1.2))
framebuffer = app.render("ppot.asc", "output.ppm")
```

`Application.render` writes the blended image as PPM and returns it as bytes
in blue, green, red order. Rotations must lie between -360 and 360 degrees.
Transforms are applied to every sample renderer, so they accumulate over
calls. A texture may be any callable taking `(u, v)` and returning an RGB
triple, or `None` for no texture; `ImageTexture.load(path)` reads a binary PPM
image for that purpose.

The pieces can also be used on their own:

- `gzrender.gz`: tokens (`Token`), interpolation modes (`Interpolation`),
  `Camera`, `Light`, `Pixel`, `ctoi`, `identity_matrix` and `RenderError`.
- `gzrender.transforms`: `rotate_x`, `rotate_y`, `rotate_z`, `translation`,
  `scaling`, `screen_matrix`, `world_to_image`, `perspective`, `multiply` and
  `MatrixStack`, a bounded stack on which each push is composed with the top.
- `gzrender.shading`: `Material` and Phong lighting of vertex normals
  (`vertex_intensities`) or a single normal (`pixel_intensity`).
- `gzrender.triangle`: vertex ordering (`sort_vertices`), edge equations
  (`make_edges`, `Edge`), interpolation planes (`make_plane`, `Plane`) and
  `bounding_box`.
- `gzrender.texture`: `ImageTexture` (bilinear lookup, coordinates clamped to
  [0, 1]) and `procedural_texture` (circles on a square grid).
- `gzrender.renderer.Renderer`: the pixel buffer and z-buffer. It takes
  attributes as `(token, value)` pairs through `put_attributes`, a camera
  through `put_camera`, transforms through `push_matrix` / `pop_matrix`, and
  triangles through `put_triangle`; `begin_render` sets up the screen,
  perspective and view transforms; `flush_to_ppm` writes a P6 image to a
  binary stream and `flush_to_framebuffer` returns the BGR bytes.
- `gzrender.application`: `Application`, `read_triangles`, `combine_samples`
  and the `main` entry point of the command.

Matrix stack overflow or underflow, more than ten directional lights, a
degenerate camera, an unreadable texture image and using an `Application`
before `initialize` raise `gzrender.gz.RenderError`.

## What it does not do

There is no window or interactive viewer: images go only to PPM files and to
the returned frame buffer bytes. Rotating, moving and scaling the model are
library calls on `Application`; the command line has no options for them.