import pytest

from gzrender.gz import Light
from gzrender.shading import Material, pixel_intensity, vertex_intensities

WHITE = (1.0, 1.0, 1.0)
NO_AMBIENT = Light((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


def test_no_lights_gives_ambient_only():
    material = Material(ambient=(0.2, 0.4, 0.6))
    ambient = Light((0.0, 0.0, 0.0), (0.5, 0.5, 0.5))
    result = pixel_intensity((0.0, 0.0, -1.0), [], ambient, material)
    assert result == pytest.approx((0.2 * 0.5, 0.4 * 0.5, 0.6 * 0.5))


def test_diffuse_only_front_light():
    material = Material(ambient=(0.0, 0.0, 0.0), diffuse=(0.3, 0.5, 0.7), specular=(0.0, 0.0, 0.0))
    light = Light((0.0, 0.0, -1.0), WHITE)
    result = pixel_intensity((0.0, 0.0, -1.0), [light], NO_AMBIENT, material)
    assert result == pytest.approx((0.3, 0.5, 0.7))


def test_back_facing_lit_from_behind_uses_negated_normal():
    material = Material(ambient=(0.0, 0.0, 0.0), diffuse=(0.3, 0.5, 0.7), specular=(0.0, 0.0, 0.0))
    light = Light((0.0, 0.0, -1.0), WHITE)
    result = pixel_intensity((0.0, 0.0, 1.0), [light], NO_AMBIENT, material)
    assert result == pytest.approx((0.3, 0.5, 0.7))


def test_light_on_opposite_side_from_eye_contributes_nothing():
    material = Material(ambient=(0.1, 0.1, 0.1), diffuse=(0.9, 0.9, 0.9), specular=(0.9, 0.9, 0.9))
    ambient = Light((0.0, 0.0, 0.0), WHITE)
    light = Light((0.0, 0.0, 1.0), WHITE)
    lit = pixel_intensity((0.0, 0.0, -1.0), [light], ambient, material)
    unlit = pixel_intensity((0.0, 0.0, -1.0), [], ambient, material)
    assert lit == pytest.approx(unlit)


def test_specular_highlight_toward_eye():
    material = Material(ambient=(0.0, 0.0, 0.0), diffuse=(0.0, 0.0, 0.0), specular=(0.25, 0.5, 0.75), power=8)
    light = Light((0.0, 0.0, -1.0), WHITE)
    result = pixel_intensity((0.0, 0.0, -1.0), [light], NO_AMBIENT, material)
    assert result == pytest.approx((0.25, 0.5, 0.75))


def test_results_are_clamped():
    material = Material(ambient=(5.0, 5.0, 5.0), diffuse=(5.0, 5.0, 5.0), specular=(5.0, 5.0, 5.0))
    light = Light((0.0, 0.0, -1.0), WHITE)
    result = pixel_intensity((0.0, 0.0, -1.0), [light], Light((0, 0, 0), WHITE), material)
    assert result == (1.0, 1.0, 1.0)
    negative = Material(ambient=(-1.0, -1.0, -1.0))
    assert pixel_intensity((0.0, 0.0, -1.0), [], Light((0, 0, 0), WHITE), negative) == (0.0, 0.0, 0.0)


def test_vertex_and_pixel_agree_without_specular():
    material = Material(ambient=(0.1, 0.2, 0.3), diffuse=(0.4, 0.5, 0.6), specular=(0.0, 0.0, 0.0))
    lights = [
        Light((-0.7071, 0.7071, 0.0), (0.5, 0.5, 0.9)),
        Light((0.0, -0.7071, -0.7071), (0.9, 0.2, 0.3)),
    ]
    ambient = Light((0.0, 0.0, 0.0), (0.3, 0.3, 0.3))
    normals = [(0.0, 0.0, -1.0), (0.0, 0.6, -0.8), (0.6, 0.0, -0.8)]
    per_vertex = vertex_intensities(normals, lights, ambient, material)
    assert len(per_vertex) == 3
    for normal, color in zip(normals, per_vertex):
        assert color == pytest.approx(pixel_intensity(normal, lights, ambient, material))


def test_vertex_specular_is_weak_with_high_power():
    material = Material(ambient=(0.0, 0.0, 0.0), diffuse=(0.0, 0.0, 0.0), specular=(1.0, 1.0, 1.0), power=32)
    light = Light((0.0, 0.0, -1.0), WHITE)
    [color] = vertex_intensities([(0.0, 0.0, -1.0)], [light], NO_AMBIENT, material)
    assert color == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)


def test_lights_add_up():
    material = Material(ambient=(0.0, 0.0, 0.0), diffuse=(0.2, 0.2, 0.2), specular=(0.0, 0.0, 0.0))
    light = Light((0.0, 0.0, -1.0), (0.5, 0.5, 0.5))
    one = pixel_intensity((0.0, 0.0, -1.0), [light], NO_AMBIENT, material)
    two = pixel_intensity((0.0, 0.0, -1.0), [light, light], NO_AMBIENT, material)
    assert two == pytest.approx(tuple(2 * c for c in one))