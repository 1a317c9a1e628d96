import numpy as np
from typing import Optional
from sklearn.cluster import KMeans

from ..utils import check_square_symmetric


def top_eigenvectors(kernel: np.ndarray, n_components: int) -> np.ndarray:
    """
    Eigenvectors of a symmetric matrix belonging to its largest eigenvalues.

    Parameters:
    -----------
    kernel : np.ndarray
        Symmetric matrix of shape (n_samples, n_samples).
    n_components : int
        Number of eigenvectors to return.

    Returns:
    --------
    np.ndarray
        Matrix of shape (n_samples, n_components), columns sorted by
        decreasing eigenvalue.
    """
    _, eigenvectors = np.linalg.eigh(kernel)
    return eigenvectors[:, ::-1][:, :n_components]


def normalise_rows(H: np.ndarray) -> np.ndarray:
    """Scale every row of H to unit Euclidean norm, leaving zero rows untouched."""
    norms = np.sqrt(np.sum(H ** 2, axis=1, keepdims=True))
    norms[norms == 0] = 1.0
    return H / norms


class KernelKMeans:
    """
    Kernel k-means through its spectral relaxation.

    The continuous relaxation of kernel k-means is solved by the top
    ``n_clusters`` eigenvectors of the kernel. Their rows are normalised to
    unit length and discretised with k-means, which gives the cluster labels.

    Labels are returned in 1..n_clusters.
    """

    def __init__(
        self,
        n_clusters: int = 2,
        n_init: int = 10,
        max_iter: int = 1000,
        random_state: Optional[int] = None
    ):
        """
        Initialize the KernelKMeans class.

        Parameters:
        -----------
        n_clusters : int, default=2
            Number of clusters.

        n_init : int, default=10
            Number of k-means restarts used to discretise the eigenvectors.

        max_iter : int, default=1000
            Maximum number of k-means iterations per restart.

        random_state : int, optional
            Random seed for the k-means initialisation.
        """
        if n_clusters < 1:
            raise ValueError(f"n_clusters must be >= 1, got {n_clusters}")

        self.n_clusters = int(n_clusters)
        self.n_init = n_init
        self.max_iter = max_iter
        self.random_state = random_state

        self.labels_ = None
        self.objective_ = None
        self.is_fitted_ = False

    def fit(self, kernel: np.ndarray) -> 'KernelKMeans':
        """
        Fit kernel k-means on a precomputed kernel.

        Parameters:
        -----------
        kernel : np.ndarray
            Positive semi-definite kernel of shape (n_samples, n_samples).

        Returns:
        --------
        self : KernelKMeans
            Returns self for method chaining.
        """
        kernel = check_square_symmetric(kernel, name="kernel")
        if self.n_clusters > kernel.shape[0]:
            raise ValueError(f"n_clusters={self.n_clusters} exceeds the number of samples {kernel.shape[0]}")

        H = top_eigenvectors(kernel, self.n_clusters)
        self.objective_ = float(np.trace(H.T @ kernel @ H) - np.trace(kernel))

        kmeans = KMeans(
            n_clusters=self.n_clusters,
            n_init=self.n_init,
            max_iter=self.max_iter,
            random_state=self.random_state
        )
        self.labels_ = kmeans.fit_predict(normalise_rows(H)) + 1
        self.is_fitted_ = True

        return self

    def fit_predict(self, kernel: np.ndarray) -> np.ndarray:
        """Fit on the kernel and return the cluster labels."""
        return self.fit(kernel).labels_

    def __repr__(self) -> str:
        return (f"KernelKMeans(n_clusters={self.n_clusters}, n_init={self.n_init}, "
                f"fitted={self.is_fitted_})")
