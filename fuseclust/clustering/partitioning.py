import numpy as np
import kmedoids
from scipy.cluster.hierarchy import linkage, fcluster
from scipy.spatial.distance import squareform
from typing import Optional

from ..utils import check_square_symmetric


def _condensed(distance: np.ndarray) -> np.ndarray:
    """Condensed form of a square distance matrix with its diagonal ignored."""
    distance = check_square_symmetric(distance, name="distance")
    distance = np.maximum(distance, distance.T)
    np.fill_diagonal(distance, 0.0)
    return squareform(distance, checks=False)


def hierarchical_labels(distance: np.ndarray, n_clusters: int, method: str = 'average') -> np.ndarray:
    """
    Agglomerative clustering on a precomputed distance, cut into n_clusters groups.

    Parameters:
    ----------
    distance : np.ndarray
        Square distance matrix of shape (n_samples, n_samples).
    n_clusters : int
        Number of clusters to cut the tree into.
    method : str, default='average'
        Linkage method passed to scipy.

    Returns:
    -------
    np.ndarray
        Cluster labels in 1..n_clusters.
    """

    linkage_matrix = linkage(_condensed(distance), method=method)
    return fcluster(linkage_matrix, n_clusters, criterion='maxclust').astype(int)


def pam_labels(distance: np.ndarray, n_clusters: int, max_iter: int = 100,
               random_state: Optional[int] = None) -> np.ndarray:
    """
    Partitioning around medoids (BUILD + SWAP) on a precomputed distance.

    Parameters:
    ----------
    distance : np.ndarray
        Square distance matrix of shape (n_samples, n_samples).
    n_clusters : int
        Number of medoids.
    max_iter : int, default=100
        Maximum number of SWAP iterations.
    random_state : int, optional
        Seed forwarded to kmedoids.

    Returns:
    -------
    np.ndarray
        Cluster labels in 1..n_clusters.
    """

    distance = squareform(_condensed(distance))
    result = kmedoids.pam(distance, n_clusters, max_iter=max_iter, init='build',
                          random_state=random_state)
    return np.asarray(result.labels, dtype=int) + 1
