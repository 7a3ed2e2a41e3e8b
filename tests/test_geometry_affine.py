import numpy as np
import pytest
from skimage.transform import estimate_transform

from homowarp.geometry.affine import (
    DegenerateTriangleError,
    affine_matrix_from_triangles,
    apply_affine,
    apply_affine_to_point,
    is_degenerate,
)
from homowarp.geometry.matrix import InvalidMatrixSize


@pytest.mark.parametrize("source, destination, expected", [
    # Translation by (1, 0)
    ([(0, 0), (0, 1), (1, 0)], [(1, 0), (1, 1), (2, 0)],
     [1, 0, 1, 0, 1, 0, 0, 0, 1]),
    # 90 degree rotation
    ([(0, 0), (0, 1), (1, 0)], [(0, 0), (1, 0), (0, -1)],
     [0, 1, 0, -1, 0, 0, 0, 0, 1]),
])
def test_affine_matrix_from_triangles(source, destination, expected):
    matrix = affine_matrix_from_triangles(source, destination)
    assert matrix.tolist() == pytest.approx(expected, abs=1e-12)


def test_affine_matrix_flat_points():
    matrix = affine_matrix_from_triangles([0, 0, 0, 1, 1, 0], [1, 0, 1, 1, 2, 0])
    assert matrix.tolist() == pytest.approx([1, 0, 1, 0, 1, 0, 0, 0, 1])


def test_affine_matrix_bottom_row():
    matrix = affine_matrix_from_triangles([(3, 1), (7, 2), (4, 9)],
                                          [(-1, 5), (2, 2), (8, 8)])
    assert matrix[6:].tolist() == [0, 0, 1]


def test_affine_matrix_reproduces_destination():
    rng = np.random.default_rng(7)
    for _ in range(25):
        src = rng.uniform(-100, 100, size=(3, 2))
        dst = rng.uniform(-100, 100, size=(3, 2))
        if is_degenerate(src, tol=1e-3):
            continue
        matrix = affine_matrix_from_triangles(src, dst)
        for (x, y), expected in zip(src, dst):
            assert apply_affine_to_point(matrix, x, y) == pytest.approx(
                tuple(expected), abs=1e-6)


def test_affine_matrix_matches_skimage():
    src = np.array([(12.0, 4.0), (80.0, 15.0), (30.0, 66.0)])
    dst = np.array([(20.0, 9.0), (75.0, 40.0), (5.0, 70.0)])
    expected = estimate_transform("affine", src, dst).params
    matrix = affine_matrix_from_triangles(src, dst)
    assert np.allclose(matrix.reshape(3, 3), expected)


def test_point_order_matters():
    src = [(0, 0), (0, 1), (1, 0)]
    dst = [(1, 0), (1, 1), (2, 0)]
    swapped = [(1, 1), (1, 0), (2, 0)]
    assert not np.allclose(affine_matrix_from_triangles(src, dst),
                           affine_matrix_from_triangles(src, swapped))


def test_degenerate_triangle_propagates_non_finite():
    matrix = affine_matrix_from_triangles([(0, 0), (1, 1), (2, 2)],
                                          [(0, 0), (1, 0), (0, 1)])
    assert not np.all(np.isfinite(matrix[:6]))


def test_degenerate_triangle_check():
    with pytest.raises(DegenerateTriangleError):
        affine_matrix_from_triangles([(0, 0), (1, 1), (2, 2)],
                                     [(0, 0), (1, 0), (0, 1)], check=True)
    # A valid triangle passes the check
    matrix = affine_matrix_from_triangles([(0, 0), (0, 1), (1, 0)],
                                          [(0, 0), (1, 0), (0, -1)], check=True)
    assert np.all(np.isfinite(matrix))


def test_is_degenerate():
    assert is_degenerate([(0, 0), (1, 1), (2, 2)]) is True
    assert is_degenerate([(5, 5), (5, 5), (5, 5)]) is True
    assert is_degenerate([(0, 0), (0, 1), (1, 0)]) is False


@pytest.mark.parametrize("points", [
    [(0, 0), (0, 1)],
    [(0, 0), (0, 1), (1, 0), (1, 1)],
    [0, 0, 1],
])
def test_wrong_point_count(points):
    with pytest.raises(ValueError):
        affine_matrix_from_triangles(points, [(0, 0), (0, 1), (1, 0)])


def test_apply_affine_to_point():
    assert apply_affine_to_point([1, 0, 1, 0, 1, 0], 2, 3) == (3, 3)
    assert apply_affine_to_point([0, 1, 0, -1, 0, 0, 0, 0, 1], 2, 3) == (3, -2)


def test_apply_affine_to_point_invalid_matrix():
    with pytest.raises(InvalidMatrixSize, match="6 elements"):
        apply_affine_to_point([1, 0, 0, 0, 1], 0, 0)


def test_apply_affine():
    points = np.array([[0, 1, 2], [0, 5, -1]])
    out = apply_affine([2, 0, 1, 0, 3, -1, 0, 0, 1], points)
    assert out.tolist() == [[1, 3, 5], [-1, 14, -4]]
    with pytest.raises(InvalidMatrixSize):
        apply_affine([1, 2, 3], points)
