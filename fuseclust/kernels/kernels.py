"""
Kernel repair and weighted kernel combination.
"""

import numpy as np
from typing import Sequence, Union

from ..exceptions import ShapeError
from ..utils import check_square_symmetric


def spectrum_shift(kernel: np.ndarray, coeff: float = 1.0) -> np.ndarray:
    """
    Make a symmetric matrix positive semi-definite by shifting its spectrum.

    If the smallest eigenvalue is negative, the identity scaled by its
    magnitude (times ``coeff``) is added, which keeps the eigenvectors and
    the off-diagonal entries and raises every eigenvalue by the same amount.
    A matrix that is already positive semi-definite is returned unchanged.

    Parameters:
    -----------
    kernel : np.ndarray
        Symmetric matrix of shape (n_samples, n_samples).
    coeff : float, default=1.0
        Multiplier applied to the magnitude of the most negative eigenvalue.
        Values above 1 push the minimum eigenvalue strictly above zero.

    Returns:
    --------
    np.ndarray
        Positive semi-definite matrix of the same shape.

    Raises:
    -------
    ShapeError
        If ``kernel`` is not square and symmetric.
    """
    kernel = check_square_symmetric(kernel, name="kernel")
    if coeff < 1.0:
        raise ValueError(f"coeff must be >= 1, got {coeff}")

    min_eigenvalue = np.linalg.eigvalsh(kernel)[0]
    if min_eigenvalue >= 0:
        return kernel

    shift = abs(min_eigenvalue) * coeff
    return kernel + shift * np.eye(kernel.shape[0])


def is_positive_semidefinite(kernel: np.ndarray, atol: float = 1e-10) -> bool:
    """Whether the smallest eigenvalue of a symmetric matrix is >= -atol."""
    kernel = check_square_symmetric(kernel, name="kernel")
    return bool(np.linalg.eigvalsh(kernel)[0] >= -atol)


def combine_kernels(kernels: Union[np.ndarray, Sequence[np.ndarray]], weights: np.ndarray) -> np.ndarray:
    """
    Combine kernels with per-observation weights.

    Entry (i, j) of the result is ``sum_m weights[i, m] * weights[j, m] * kernels[m][i, j]``,
    i.e. the sum over views of the outer product of a weight column with
    itself, multiplied elementwise with that view's kernel.

    Parameters:
    -----------
    kernels : Union[np.ndarray, Sequence[np.ndarray]]
        Array of shape (n_views, n_samples, n_samples) or a sequence of
        n_views matrices of shape (n_samples, n_samples).
    weights : np.ndarray
        Weight matrix of shape (n_samples, n_views).

    Returns:
    --------
    np.ndarray
        Combined kernel of shape (n_samples, n_samples).
    """
    kernels = np.asarray(kernels, dtype=float)
    weights = np.asarray(weights, dtype=float)

    if kernels.ndim != 3 or kernels.shape[1] != kernels.shape[2]:
        raise ShapeError(f"kernels must have shape (n_views, n_samples, n_samples), got {kernels.shape}")
    n_views, n_samples, _ = kernels.shape
    if weights.shape != (n_samples, n_views):
        raise ShapeError(f"weights must have shape ({n_samples}, {n_views}), got {weights.shape}")

    return np.einsum('im,jm,mij->ij', weights, weights, kernels)


def kernel_to_distance(kernel: np.ndarray) -> np.ndarray:
    """
    Turn a similarity kernel into a dissimilarity matrix.

    The distance is ``1 - kernel`` with a zero diagonal; negative values
    caused by rounding are clipped to zero.

    Parameters:
    -----------
    kernel : np.ndarray
        Similarity matrix of shape (n_samples, n_samples).

    Returns:
    --------
    np.ndarray
        Distance matrix of shape (n_samples, n_samples).
    """
    distance = 1.0 - check_square_symmetric(kernel, name="kernel")
    distance = np.clip((distance + distance.T) / 2.0, 0.0, None)
    np.fill_diagonal(distance, 0.0)
    return distance
