import numpy as np
from sklearn.preprocessing import StandardScaler

from .exceptions import ShapeError


def check_square_symmetric(matrix: np.ndarray, name: str = "matrix", atol: float = 1e-8) -> np.ndarray:
    """
    Check that a matrix is square and symmetric.

    Parameters:
    ----------
    matrix : np.ndarray
        Matrix to check.
    name : str, default="matrix"
        Name used in the error message.
    atol : float, default=1e-8
        Absolute tolerance for the symmetry check.

    Returns:
    -------
    np.ndarray
        The matrix as a dense float array.

    Raises:
    -------
    ShapeError
        If the matrix is not two-dimensional, square and symmetric.
    """

    matrix = np.array(matrix, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ShapeError(f"{name} must be a square matrix, got shape {matrix.shape}")
    if not np.allclose(matrix, matrix.T, atol=atol):
        raise ShapeError(f"{name} must be symmetric")

    return matrix


def scale_view(X: np.ndarray) -> np.ndarray:
    """
    Scale every column of a dataset to zero mean and unit variance.

    Parameters:
    ----------
    X : np.ndarray
        Data matrix of shape (n_samples, n_features).

    Returns:
    -------
    np.ndarray
        Standardised data matrix.
    """

    return StandardScaler().fit_transform(X)
