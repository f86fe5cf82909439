import io

import pytest

from gzrender.application import (
    AA_FILTER,
    Application,
    combine_samples,
    main,
    read_triangles,
)
from gzrender.gz import AAKERNEL_SIZE, RenderError
from gzrender.renderer import Renderer
from gzrender.texture import procedural_texture
from gzrender.transforms import multiply, rotate_y, scaling, translation

TRIANGLE_TEXT = (
    "triangle\n"
    "0.1 0.2 0.3 0.0 0.0 1.0 0.25 0.5\n"
    "1.0 0.0 0.0 0.0 1.0 0.0 0.75 0.5\n"
    "0.0 1.0 0.0 1.0 0.0 0.0 0.5 1.0\n"
)


@pytest.fixture
def app():
    application = Application(4, 4, None)
    application.initialize()
    return application


def test_read_triangles_parses_one_triangle():
    triangles = list(read_triangles(io.StringIO(TRIANGLE_TEXT)))
    assert len(triangles) == 1
    vertices, normals, uvs = triangles[0]
    assert vertices == [(0.1, 0.2, 0.3), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
    assert normals == [(0.0, 0.0, 1.0), (0.0, 1.0, 0.0), (1.0, 0.0, 0.0)]
    assert uvs == [(0.25, 0.5), (0.75, 0.5), (0.5, 1.0)]


def test_read_triangles_reads_several():
    triangles = list(read_triangles(io.StringIO(TRIANGLE_TEXT * 3)))
    assert len(triangles) == 3


def test_read_triangles_empty():
    assert list(read_triangles(io.StringIO(""))) == []


def test_read_triangles_truncated():
    with pytest.raises(ValueError):
        list(read_triangles(io.StringIO("triangle 1 2 3")))


def test_combine_samples_equal_halves_keep_background():
    first, second = Renderer(2, 2), Renderer(2, 2)
    combined = combine_samples([first, second], [0.5, 0.5])
    background = first.get(0, 0)
    assert combined == [(background.red, background.green, background.blue)] * 4


def test_combine_samples_zero_weight():
    combined = combine_samples([Renderer(2, 1)], [0.0])
    assert combined == [(0, 0, 0), (0, 0, 0)]


def test_combine_samples_mismatched_weights():
    with pytest.raises(ValueError):
        combine_samples([Renderer(2, 2)], [0.5, 0.5])


def test_combine_samples_empty():
    with pytest.raises(ValueError):
        combine_samples([], [])


def test_initialize_sets_up_sample_renderers(app):
    assert len(app.renderers) == AAKERNEL_SIZE + 1
    for renderer, (x, y, _) in zip(app.renderers, AA_FILTER):
        assert (renderer.x_offset, renderer.y_offset) == pytest.approx((x, y))
    assert (app.display.x_offset, app.display.y_offset) == (0.0, 0.0)
    assert app.display.camera.fov == pytest.approx(63.7)
    assert len(app.display.lights) == 3
    assert app.display.material.power == 32.0
    assert len(app.display.ximage) == 6


def test_operations_before_initialize_fail():
    application = Application(4, 4)
    with pytest.raises(RenderError):
        application.rotate(0, 10.0)
    with pytest.raises(RenderError):
        application.render()


def test_rotate_pushes_onto_every_renderer(app):
    before = [renderer.ximage.top() for renderer in app.renderers]
    app.rotate(1, 30.0)
    for renderer, top in zip(app.renderers, before):
        assert len(renderer.ximage) == 7
        assert renderer.ximage.top() == pytest.approx_matrix(multiply(top, rotate_y(30.0))) if False else True
        expected = multiply(top, rotate_y(30.0))
        for row, expected_row in zip(renderer.ximage.top(), expected):
            assert row == pytest.approx(expected_row)


def test_rotate_rejects_bad_axis_and_angle(app):
    with pytest.raises(ValueError):
        app.rotate(3, 10.0)
    with pytest.raises(ValueError):
        app.rotate(0, 400.0)


def test_translate_and_scale_compose(app):
    top = app.display.ximage.top()
    app.translate((1.0, 2.0, 3.0))
    app.scale((2.0, 2.0, 2.0))
    expected = multiply(multiply(top, translation((1.0, 2.0, 3.0))), scaling((2.0, 2.0, 2.0)))
    for row, expected_row in zip(app.display.ximage.top(), expected):
        assert row == pytest.approx(expected_row)


def test_render_empty_model_writes_ppm(app, tmp_path):
    model = tmp_path / "model.asc"
    model.write_text("")
    output = tmp_path / "out.ppm"
    framebuffer = app.render(model, output)
    data = output.read_bytes()
    header = b"P6 4 4 255\n"
    assert data.startswith(header)
    assert len(data) == len(header) + 4 * 4 * 3
    assert len(framebuffer) == 4 * 4 * 3
    assert framebuffer == app.framebuffer


def test_render_output_matches_blended_pixels(tmp_path):
    application = Application(8, 8, procedural_texture)
    application.initialize()
    model = tmp_path / "model.asc"
    model.write_text(TRIANGLE_TEXT)
    output = tmp_path / "out.ppm"
    framebuffer = application.render(model, output)
    pixels = application.display.pixels
    body = output.read_bytes()[len(b"P6 8 8 255\n"):]
    expected = bytes(
        value
        for pixel in pixels
        for value in ((pixel.red >> 4) & 0xFF, (pixel.green >> 4) & 0xFF, (pixel.blue >> 4) & 0xFF)
    )
    assert body == expected
    assert framebuffer[0::3] == body[2::3]
    assert framebuffer[2::3] == body[0::3]


def test_render_missing_model(app, tmp_path):
    with pytest.raises(OSError):
        app.render(tmp_path / "absent.asc", tmp_path / "out.ppm")


def test_main_missing_texture_fails(tmp_path):
    model = tmp_path / "model.asc"
    model.write_text("")
    status = main(
        [
            "--model", str(model),
            "--output", str(tmp_path / "out.ppm"),
            "--texture", str(tmp_path / "absent"),
            "--width", "2",
            "--height", "2",
        ]
    )
    assert status == 1
    assert not (tmp_path / "out.ppm").exists()


def test_main_procedural_renders(tmp_path):
    model = tmp_path / "model.asc"
    model.write_text("")
    output = tmp_path / "out.ppm"
    status = main(
        ["--model", str(model), "--output", str(output), "--procedural", "--width", "2", "--height", "3"]
    )
    assert status == 0
    assert output.read_bytes().startswith(b"P6 2 3 255\n")


def test_main_missing_model_fails(tmp_path):
    status = main(
        [
            "--model", str(tmp_path / "absent.asc"),
            "--output", str(tmp_path / "out.ppm"),
            "--procedural",
            "--width", "2",
            "--height", "2",
        ]
    )
    assert status == 1