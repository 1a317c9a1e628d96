import numpy as np
import pytest

from fuseclust.exceptions import ShapeError
from fuseclust.kernels import spectrum_shift, is_positive_semidefinite, combine_kernels, kernel_to_distance


def test_spectrum_shift_makes_matrix_psd(indefinite_matrix):
    assert np.linalg.eigvalsh(indefinite_matrix)[0] < 0

    repaired = spectrum_shift(indefinite_matrix)

    assert np.linalg.eigvalsh(repaired)[0] >= -1e-10
    assert np.allclose(repaired, repaired.T)


def test_spectrum_shift_keeps_off_diagonal_and_eigenvectors(indefinite_matrix):
    repaired = spectrum_shift(indefinite_matrix)
    off_diagonal = ~np.eye(8, dtype=bool)

    assert np.allclose(repaired[off_diagonal], indefinite_matrix[off_diagonal])
    shift = repaired[0, 0] - indefinite_matrix[0, 0]
    assert shift == pytest.approx(-np.linalg.eigvalsh(indefinite_matrix)[0])
    assert np.allclose(np.diag(repaired) - np.diag(indefinite_matrix), shift)


def test_spectrum_shift_is_idempotent(indefinite_matrix):
    once = spectrum_shift(indefinite_matrix)
    twice = spectrum_shift(once)

    assert np.allclose(once, twice, atol=1e-10)


def test_spectrum_shift_leaves_psd_matrix_unchanged():
    rng = np.random.RandomState(0)
    X = rng.normal(size=(6, 3))
    gram = X @ X.T + 0.1 * np.eye(6)

    assert np.array_equal(spectrum_shift(gram), gram)


def test_spectrum_shift_coeff_pushes_above_zero(indefinite_matrix):
    repaired = spectrum_shift(indefinite_matrix, coeff=1.01)
    assert np.linalg.eigvalsh(repaired)[0] > 0


@pytest.mark.parametrize("matrix", [
    np.ones((3, 4)),
    np.array([[1.0, 0.2], [0.7, 1.0]]),
    np.ones(5),
])
def test_spectrum_shift_rejects_non_kernels(matrix):
    with pytest.raises(ShapeError):
        spectrum_shift(matrix)


def test_is_positive_semidefinite(indefinite_matrix, block_kernel):
    assert not is_positive_semidefinite(indefinite_matrix)
    assert is_positive_semidefinite(block_kernel)


def test_combine_kernels_matches_sum_of_weighted_outer_products():
    rng = np.random.RandomState(1)
    kernels = []
    for _ in range(3):
        X = rng.normal(size=(7, 4))
        kernels.append(X @ X.T)
    weights = rng.dirichlet(np.ones(3), size=7)

    expected = np.zeros((7, 7))
    for m in range(3):
        expected += np.outer(weights[:, m], weights[:, m]) * kernels[m]

    combined = combine_kernels(kernels, weights)

    assert combined.shape == (7, 7)
    assert np.allclose(combined, expected)
    assert np.allclose(combined, combined.T)


def test_combine_kernels_checks_weight_shape(block_kernel):
    with pytest.raises(ShapeError):
        combine_kernels([block_kernel, block_kernel], np.ones((10, 3)))


def test_kernel_to_distance(block_kernel):
    kernel = spectrum_shift(block_kernel, coeff=1.01) + 0.5 * np.eye(10)
    distance = kernel_to_distance(kernel)

    assert np.all(np.diag(distance) == 0)
    assert distance[0, 1] == pytest.approx(0.0)
    assert distance[0, 9] == pytest.approx(1.0)
    assert np.all(distance >= 0)
