import numpy as np
import pytest

from homowarp.geometry.matrix import InvalidMatrixSize, complete, determinant, inverse


def test_determinant():
    assert determinant([1, 2, 1, 3, 4, 1, -1, 2, -1]) == 8


def test_determinant_six_elements():
    # Bottom row [1, 1, 1] is implied
    assert determinant([1, 0, 0, 0, 1, 0]) == determinant([1, 0, 0, 0, 1, 0, 1, 1, 1])
    assert determinant([0, 0, 1, 0, 1, 0]) == -1


@pytest.mark.parametrize("size", [0, 4, 5, 7, 8, 10, 16])
def test_invalid_size(size):
    with pytest.raises(InvalidMatrixSize):
        determinant(np.ones(size))
    with pytest.raises(InvalidMatrixSize):
        inverse(np.ones(size))


def test_invalid_size_is_value_error():
    with pytest.raises(ValueError, match="Invalid matrix size: 4"):
        determinant([1, 2, 3, 4])


@pytest.mark.parametrize("matrix, expected", [
    ([1, 2, 1, 3, 4, 1, -1, 2, -1],
     [-3 / 4, 1 / 2, -1 / 4, 1 / 4, 0, 1 / 4, 5 / 4, -1 / 2, -1 / 4]),
    ([1, 0, 0, 0, 1, 0, 1, 1, 1],
     [1, 0, 0, 0, 1, 0, -1, -1, 1]),
    ([1, 0, 0, 0, 1, 0],
     [1, 0, 0, 0, 1, 0, -1, -1, 1]),
])
def test_inverse(matrix, expected):
    inv = inverse(matrix)
    assert inv.shape == (9,)
    assert inv.tolist() == pytest.approx(expected, abs=1e-12)

    original = matrix if len(matrix) == 9 else matrix + [1, 1, 1]
    assert inverse(inv).tolist() == pytest.approx(original, abs=1e-12)


def test_inverse_times_matrix_is_identity():
    m = np.array([2, -1, 0, -1, 2, -1, 0, -1, 2], dtype=float)
    product = m.reshape(3, 3) @ inverse(m).reshape(3, 3)
    assert np.allclose(product, np.eye(3))


def test_inverse_six_element_matches_completed_form():
    m6 = [3, -2, 5, 0.5, 4, -1]
    assert np.allclose(inverse(m6), inverse(complete(m6)))


def test_double_inverse_random_matrices():
    rng = np.random.default_rng(42)
    for _ in range(20):
        m = rng.uniform(-10, 10, size=9)
        if abs(determinant(m)) < 1e-3:
            continue
        assert np.allclose(inverse(inverse(m)), m, atol=1e-4)

        m6 = m[:6]
        if abs(determinant(m6)) < 1e-3:
            continue
        assert np.allclose(inverse(inverse(m6)), complete(m6), atol=1e-4)


def test_inverse_singular_propagates_non_finite():
    # Rows 1 and 2 are identical
    inv = inverse([1, 2, 3, 1, 2, 3, 4, 5, 6])
    assert inv.shape == (9,)
    assert not np.all(np.isfinite(inv))


def test_inverse_does_not_mutate_input():
    m = np.array([1, 2, 1, 3, 4, 1, -1, 2, -1], dtype=float)
    before = m.copy()
    inverse(m)
    assert np.array_equal(m, before)


def test_complete():
    assert complete([1, 2, 3, 4, 5, 6]).tolist() == [1, 2, 3, 4, 5, 6, 1, 1, 1]
    assert complete(range(9)).tolist() == list(range(9))
    with pytest.raises(InvalidMatrixSize):
        complete([1, 2, 3])
