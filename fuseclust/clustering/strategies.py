"""
Strategies that turn a consensus kernel into a clustering with a given number of clusters.

The table is closed: 'kkmeans' (kernel k-means on the kernel), 'hclust'
(average-linkage hierarchical clustering on 1 - kernel) and 'pam'
(partitioning around medoids on 1 - kernel).
"""

import numpy as np
from typing import Callable, Dict, Optional

from ..exceptions import ConfigError
from ..kernels import kernel_to_distance
from .kernel_kmeans import KernelKMeans
from .partitioning import hierarchical_labels, pam_labels


def _kkmeans(kernel: np.ndarray, n_clusters: int, random_state: Optional[int] = None) -> np.ndarray:
    return KernelKMeans(n_clusters=n_clusters, random_state=random_state).fit_predict(kernel)


def _hclust(kernel: np.ndarray, n_clusters: int, random_state: Optional[int] = None) -> np.ndarray:
    return hierarchical_labels(kernel_to_distance(kernel), n_clusters, method='average')


def _pam(kernel: np.ndarray, n_clusters: int, random_state: Optional[int] = None) -> np.ndarray:
    return pam_labels(kernel_to_distance(kernel), n_clusters, random_state=random_state)


CLUSTERING_STRATEGIES: Dict[str, Callable[..., np.ndarray]] = {
    'kkmeans': _kkmeans,
    'hclust': _hclust,
    'pam': _pam,
}


def get_strategy(name: str) -> Callable[..., np.ndarray]:
    """
    Look up a clustering strategy by name.

    Parameters:
    -----------
    name : str
        One of 'kkmeans', 'hclust' or 'pam'.

    Returns:
    --------
    Callable
        Function ``(kernel, n_clusters, random_state=None) -> labels``.

    Raises:
    -------
    ConfigError
        If the name is not a known strategy.
    """
    if name not in CLUSTERING_STRATEGIES:
        raise ConfigError(f"Unknown clustering strategy: {name!r}. "
                          f"Available options: {list(CLUSTERING_STRATEGIES.keys())}")
    return CLUSTERING_STRATEGIES[name]


def cluster_kernel(kernel: np.ndarray, n_clusters: int, strategy: str = 'kkmeans',
                   random_state: Optional[int] = None) -> np.ndarray:
    """Cluster a kernel into n_clusters groups with the named strategy; labels are in 1..n_clusters."""
    return get_strategy(strategy)(kernel, n_clusters, random_state=random_state)
