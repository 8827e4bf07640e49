import math
import random

import numpy as np
import pytest

from fractal_plate.errors import InvalidArgumentError
from fractal_plate.outline import DEFAULT_RADIUS, generate_outline, ring_area


def _polar(degrees, radius=DEFAULT_RADIUS):
    return np.array([(radius * math.cos(math.radians(d)), radius * math.sin(math.radians(d))) for d in degrees])


def _expected_count(divisions, depth):
    count = 0
    for _ in range(depth):
        count = divisions // 2 * (2 + count)
    return count


def test_depth_one_without_jitter_is_regular_hexagon():
    outline = generate_outline(6, 1, jitter=0.0)
    np.testing.assert_allclose(outline, _polar([-30, 30, 90, 150, 210, 270]), atol=1e-12)
    np.testing.assert_allclose(np.linalg.norm(outline, axis=1), 1 / 7)


def test_depth_one_square():
    outline = generate_outline(4, 1, jitter=0.0)
    h = DEFAULT_RADIUS / math.sqrt(2)
    np.testing.assert_allclose(outline, [(h, -h), (h, h), (-h, h), (-h, -h)], atol=1e-12)


@pytest.mark.parametrize("divisions,depth", [(2, 1), (4, 2), (6, 1), (6, 2), (6, 3), (8, 2)])
def test_point_count_and_finite(divisions, depth):
    outline = generate_outline(divisions, depth, rng=np.random.default_rng(divisions * 10 + depth))
    assert outline.shape == (_expected_count(divisions, depth), 2)
    assert len(outline) >= divisions
    assert np.all(np.isfinite(outline))


def test_child_points_sit_between_parent_corners():
    outline = generate_outline(6, 2, jitter=0.0)
    r = DEFAULT_RADIUS
    # first lobe: parent corner, the six child corners around (2r, 0), parent corner
    np.testing.assert_allclose(outline[0], _polar([-30])[0], atol=1e-12)
    child = np.array([2 * r, 0.0]) + _polar([-150, -90, -30, 30, 90, 150], r / 2)
    np.testing.assert_allclose(outline[1:7], child, atol=1e-12)
    np.testing.assert_allclose(outline[7], _polar([30])[0], atol=1e-12)


def test_generated_outline_is_counter_clockwise():
    assert ring_area(generate_outline(6, 2, jitter=0.0)) > 0
    assert ring_area(generate_outline(8, 3, rng=np.random.default_rng(3))) > 0


def test_jitter_is_bounded():
    divisions = 6
    regular = generate_outline(divisions, 1, jitter=0.0)
    jittered = generate_outline(divisions, 1, rng=np.random.default_rng(11))
    bound = math.pi / divisions / 2 * DEFAULT_RADIUS
    assert np.all(np.abs(jittered - regular) <= bound + 1e-12)
    assert not np.allclose(jittered, regular)


def test_seeded_generation_is_reproducible():
    a = generate_outline(6, 3, rng=np.random.default_rng(42))
    b = generate_outline(6, 3, rng=np.random.default_rng(42))
    c = generate_outline(6, 3, rng=np.random.default_rng(43))
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)


def test_accepts_stdlib_random():
    outline = generate_outline(4, 2, rng=random.Random(5))
    assert outline.shape == (_expected_count(4, 2), 2)


def test_outline_is_read_only():
    outline = generate_outline(6, 1, jitter=0.0)
    with pytest.raises(ValueError):
        outline[0, 0] = 1.0


def test_depth_zero_is_empty():
    assert generate_outline(6, 0).shape == (0, 2)


@pytest.mark.parametrize("divisions", [3, 5, 7])
def test_odd_divisions_rejected(divisions):
    with pytest.raises(InvalidArgumentError):
        generate_outline(divisions, 2)


def test_other_invalid_arguments():
    with pytest.raises(InvalidArgumentError):
        generate_outline(0, 1)
    with pytest.raises(InvalidArgumentError):
        generate_outline(6, -1)
    with pytest.raises(InvalidArgumentError):
        generate_outline(6, 1, radius=0.0)


def test_ring_area():
    square = [(0, 0), (1, 0), (1, 1), (0, 1)]
    assert ring_area(square) == pytest.approx(1.0)
    assert ring_area(square[::-1]) == pytest.approx(-1.0)
    assert ring_area([(0, 0), (1, 0)]) == 0.0
