import numpy as np
import pytest

from geometry import distance, rotate


def test_distance_is_euclidean():
    assert distance(np.array([0.0, 0.0]), np.array([3.0, 4.0])) == pytest.approx(5.0)


def test_distance_is_symmetric():
    a = np.array([12.5, -3.0])
    b = np.array([-7.0, 8.25])
    assert distance(a, b) == pytest.approx(distance(b, a))


def test_rotate_quarter_turn():
    rotated = rotate(np.array([1.0, 0.0]), np.pi / 2)
    np.testing.assert_allclose(rotated, [0.0, 1.0], atol=1e-12)


def test_rotate_preserves_length_and_undoes_with_negative_angle():
    v = np.array([0.3, -1.7])
    rotated = rotate(v, 0.83)
    assert np.hypot(*rotated) == pytest.approx(np.hypot(*v))
    np.testing.assert_allclose(rotate(rotated, -0.83), v, atol=1e-12)


def test_rotate_returns_new_vector():
    v = np.array([2.0, 1.0])
    rotate(v, 1.0)
    np.testing.assert_array_equal(v, [2.0, 1.0])
