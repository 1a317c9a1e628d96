"""
Consensus clustering of a single view.

This module provides the ConsensusClustering class that summarises repeated
clusterings of random subsamples of a dataset into a consensus matrix, whose
entry (i, j) is the fraction of subsamples containing both i and j in which
they were assigned to the same cluster.
"""

import numpy as np
from typing import Optional
from scipy.cluster.hierarchy import linkage, fcluster
from scipy.spatial.distance import pdist, squareform
from sklearn.cluster import KMeans
from sklearn.model_selection import ShuffleSplit
from sklearn.utils import check_random_state
from tqdm import tqdm

from ..exceptions import ConfigError
from ..clustering.partitioning import pam_labels

CONSENSUS_METHODS = ['kmeans', 'hclust', 'pam']

# Distance names as used by R's dist(), mapped to scipy pdist metrics
DISTANCE_ALIASES = {
    'manhattan': 'cityblock',
    'maximum': 'chebyshev',
    'binary': 'jaccard',
}

PDIST_METRICS = [
    'braycurtis', 'canberra', 'chebyshev', 'cityblock', 'correlation', 'cosine',
    'euclidean', 'hamming', 'jaccard', 'jensenshannon', 'minkowski',
    'seuclidean', 'sqeuclidean',
]


def resolve_distance(name: str) -> str:
    """
    Translate a distance name into a scipy pdist metric.

    Parameters:
    -----------
    name : str
        R-style name ('euclidean', 'manhattan', 'maximum', 'canberra',
        'binary', 'minkowski') or any supported scipy pdist metric.

    Returns:
    --------
    str
        The scipy metric name.

    Raises:
    -------
    ConfigError
        If the name is not recognised.
    """
    metric = DISTANCE_ALIASES.get(name, name)
    if metric not in PDIST_METRICS:
        raise ConfigError(f"Unknown distance: {name!r}. "
                          f"Available options: {sorted(set(PDIST_METRICS) | set(DISTANCE_ALIASES))}")
    return metric


class ConsensusClustering:
    """
    Consensus matrix of one dataset at a fixed number of clusters.

    Features:
    - Subsamples a fraction ``p_item`` of the observations without replacement
      ``n_resamples`` times
    - Clusters every subsample with k-means, average-linkage hierarchical
      clustering or partitioning around medoids
    - Normalises co-clustering counts by the number of times each pair was
      drawn together; pairs never drawn together get consensus 0
    """

    def __init__(
        self,
        n_clusters: int = 2,
        n_resamples: int = 1000,
        method: str = 'kmeans',
        distance: str = 'euclidean',
        p_item: float = 0.8,
        linkage_method: str = 'average',
        verbose: bool = False,
        random_state: Optional[int] = None
    ):
        """
        Initialize the ConsensusClustering class.

        Parameters:
        -----------
        n_clusters : int, default=2
            Number of clusters used for every subsample.

        n_resamples : int, default=1000
            Number of subsamples.

        method : str, default='kmeans'
            Clustering algorithm applied to every subsample. Options:
            - 'kmeans': k-means on the raw features
            - 'hclust': hierarchical clustering on ``distance``, cut at n_clusters
            - 'pam': partitioning around medoids on ``distance``

        distance : str, default='euclidean'
            Distance used by 'hclust' and 'pam'. Ignored by 'kmeans'.

        p_item : float, default=0.8
            Fraction of observations drawn in every subsample (0 < p_item <= 1).

        linkage_method : str, default='average'
            Linkage used when method='hclust'.

        verbose : bool, default=False
            Whether to show a progress bar over the subsamples.

        random_state : int, optional
            Random seed controlling the subsamples and the clustering runs.
        """
        if method not in CONSENSUS_METHODS:
            raise ConfigError(f"Unknown consensus clustering method: {method!r}. "
                              f"Available options: {CONSENSUS_METHODS}")
        if not (0 < p_item <= 1.0):
            raise ValueError(f"p_item must be between 0 and 1, got {p_item}")
        if n_resamples < 1:
            raise ValueError("n_resamples must be >= 1")

        self.n_clusters = int(n_clusters)
        self.n_resamples = int(n_resamples)
        self.method = method
        self.distance = distance
        self.metric = resolve_distance(distance)
        self.p_item = p_item
        self.linkage_method = linkage_method
        self.verbose = verbose
        self.random_state = random_state

        self.consensus_matrix_ = None
        self.selection_counts_ = None
        self.is_fitted_ = False

    def _subsamples(self, n_samples: int, n_items: int, rng: np.random.RandomState):
        """Yield the observation indices of every subsample."""
        if n_items == n_samples:
            for _ in range(self.n_resamples):
                yield np.arange(n_samples)
            return

        splitter = ShuffleSplit(
            n_splits=self.n_resamples,
            train_size=n_items,
            test_size=n_samples - n_items,
            random_state=rng
        )
        for train_idx, _ in splitter.split(np.zeros((n_samples, 1))):
            yield train_idx

    def _cluster_subsample(self, X_sub: np.ndarray, seed: int) -> np.ndarray:
        """Cluster one subsample with the configured method."""
        if self.method == 'kmeans':
            return KMeans(n_clusters=self.n_clusters, n_init=10, random_state=seed).fit_predict(X_sub)

        distances = pdist(X_sub, metric=self.metric)
        if self.method == 'hclust':
            return fcluster(linkage(distances, method=self.linkage_method),
                            self.n_clusters, criterion='maxclust')

        return pam_labels(squareform(distances), self.n_clusters, random_state=seed)

    def fit(self, X: np.ndarray) -> 'ConsensusClustering':
        """
        Compute the consensus matrix of a dataset.

        Parameters:
        -----------
        X : np.ndarray
            Data matrix of shape (n_samples, n_features).

        Returns:
        --------
        self : ConsensusClustering
            Returns self for method chaining.
        """
        X = np.asarray(X, dtype=float)
        n_samples = X.shape[0]
        n_items = int(np.ceil(n_samples * self.p_item))
        if n_items < self.n_clusters:
            raise ValueError(f"Subsamples of {n_items} observations cannot be split "
                             f"into {self.n_clusters} clusters")

        rng = check_random_state(self.random_state)
        co_clustered = np.zeros((n_samples, n_samples))
        selected = np.zeros((n_samples, n_samples))

        subsample_iter = self._subsamples(n_samples, n_items, rng)
        if self.verbose:
            subsample_iter = tqdm(subsample_iter, total=self.n_resamples,
                                  desc=f"Consensus clustering (K={self.n_clusters})")

        for items in subsample_iter:
            labels = self._cluster_subsample(X[items], seed=rng.randint(np.iinfo(np.int32).max))

            selected[np.ix_(items, items)] += 1
            for label in np.unique(labels):
                members = items[labels == label]
                co_clustered[np.ix_(members, members)] += 1

        consensus = np.zeros((n_samples, n_samples))
        np.divide(co_clustered, selected, out=consensus, where=selected > 0)
        np.fill_diagonal(consensus, 1.0)

        self.consensus_matrix_ = consensus
        self.selection_counts_ = selected
        self.is_fitted_ = True

        return self

    def fit_transform(self, X: np.ndarray) -> np.ndarray:
        """Fit on X and return the consensus matrix of shape (n_samples, n_samples)."""
        self.fit(X)
        return self.consensus_matrix_

    def get_distance_matrix(self) -> np.ndarray:
        """
        Get the consensus distance ``1 - consensus``.

        Raises:
        -------
        ValueError
            If the matrix has not been fitted yet.
        """
        if not self.is_fitted_:
            raise ValueError("Consensus matrix has not been fitted yet. Call fit() first.")
        return 1.0 - self.consensus_matrix_

    def __repr__(self) -> str:
        return (f"ConsensusClustering(n_clusters={self.n_clusters}, "
                f"n_resamples={self.n_resamples}, "
                f"method={self.method!r}, "
                f"distance={self.distance!r}, "
                f"fitted={self.is_fitted_})")


def consensus_matrix(
    X: np.ndarray,
    n_clusters: int,
    n_resamples: int = 1000,
    method: str = 'kmeans',
    distance: str = 'euclidean',
    p_item: float = 0.8,
    random_state: Optional[int] = None
) -> np.ndarray:
    """
    Consensus matrix of a dataset at a fixed number of clusters.

    Shortcut for ``ConsensusClustering(...).fit_transform(X)``; see
    ConsensusClustering for the parameters.
    """
    return ConsensusClustering(
        n_clusters=n_clusters,
        n_resamples=n_resamples,
        method=method,
        distance=distance,
        p_item=p_item,
        random_state=random_state
    ).fit_transform(X)
