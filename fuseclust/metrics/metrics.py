import numpy as np
from scipy.cluster.hierarchy import linkage
from scipy.spatial.distance import squareform
from sklearn.metrics import silhouette_score
from typing import Union, List


def _n_clusters_valid(labels: np.ndarray) -> bool:
    """Internal indices need at least two clusters and fewer clusters than samples."""
    n_clusters = len(np.unique(labels))
    return 2 <= n_clusters <= len(labels) - 1


def silhouette_scoring(distance: np.ndarray, lab: Union[np.ndarray, List[int]]) -> float:
    """
    Calculate the average silhouette width for a precomputed distance.

    Parameters:
    -----------
    distance : np.ndarray
        Square distance matrix of shape (n_samples, n_samples) with zero diagonal.
    lab : Union[np.ndarray, List[int]]
        Cluster label of every sample.

    Returns:
    --------
    float
        Average silhouette width in [-1, 1], or NaN if the labels define
        fewer than two clusters or as many clusters as samples.
    """

    lab = np.asarray(lab)
    if not _n_clusters_valid(lab):
        return np.nan

    return float(silhouette_score(distance, lab, metric='precomputed'))


def widest_gap_scoring(distance: np.ndarray, lab: Union[np.ndarray, List[int]]) -> float:
    """
    Calculate the widest within-cluster gap.

    The gap of a cluster is the largest merge height of single-linkage
    clustering restricted to its members, i.e. the longest edge of its
    minimum spanning tree. Smaller is better.

    Parameters:
    -----------
    distance : np.ndarray
        Square distance matrix of shape (n_samples, n_samples).
    lab : Union[np.ndarray, List[int]]
        Cluster label of every sample.

    Returns:
    --------
    float
        Widest gap over all clusters, or NaN for an invalid number of clusters.
    """

    lab = np.asarray(lab)
    if not _n_clusters_valid(lab):
        return np.nan

    widest = 0.0
    for cluster_id in np.unique(lab):
        members = np.where(lab == cluster_id)[0]
        if len(members) < 2:
            continue
        within = distance[np.ix_(members, members)]
        heights = linkage(squareform(within, checks=False), method='single')[:, 2]
        widest = max(widest, float(np.max(heights)))

    return widest


def _separation_and_diameter(distance: np.ndarray, lab: np.ndarray, between, within):
    """Smallest reduced between-cluster block and largest reduced within-cluster block."""
    clusters = np.unique(lab)
    masks = [lab == cluster_id for cluster_id in clusters]

    separations = []
    for a in range(len(clusters)):
        for b in range(a + 1, len(clusters)):
            separations.append(float(between(distance[np.ix_(masks[a], masks[b])])))

    diameters = []
    for mask in masks:
        n_members = int(np.sum(mask))
        if n_members < 2:
            diameters.append(0.0)
            continue
        block = distance[np.ix_(mask, mask)]
        diameters.append(float(within(block[~np.eye(n_members, dtype=bool)])))

    return min(separations), max(diameters)


def _ratio(separation: float, diameter: float) -> float:
    """Separation over diameter; inf for compact clusters that are apart, NaN when both are zero."""
    if diameter > 0:
        return float(separation / diameter)
    return np.inf if separation > 0 else np.nan


def dunn_scoring(distance: np.ndarray, lab: Union[np.ndarray, List[int]]) -> float:
    """
    Calculate Dunn's index: minimum separation over maximum diameter.

    Separation is the smallest distance between members of two different
    clusters, diameter the largest distance inside a cluster. Larger is better.

    Parameters:
    -----------
    distance : np.ndarray
        Square distance matrix of shape (n_samples, n_samples).
    lab : Union[np.ndarray, List[int]]
        Cluster label of every sample.

    Returns:
    --------
    float
        Dunn's index (inf when every cluster has zero diameter), or NaN for
        an invalid number of clusters.
    """

    lab = np.asarray(lab)
    if not _n_clusters_valid(lab):
        return np.nan

    separation, diameter = _separation_and_diameter(distance, lab, between=np.min, within=np.max)
    return _ratio(separation, diameter)


def dunn2_scoring(distance: np.ndarray, lab: Union[np.ndarray, List[int]]) -> float:
    """
    Calculate the alternative Dunn index.

    Ratio between the smallest average distance between two clusters and the
    largest average distance within a cluster. Larger is better.

    Parameters:
    -----------
    distance : np.ndarray
        Square distance matrix of shape (n_samples, n_samples).
    lab : Union[np.ndarray, List[int]]
        Cluster label of every sample.

    Returns:
    --------
    float
        Alternative Dunn index, or NaN for an invalid number of clusters.
    """

    lab = np.asarray(lab)
    if not _n_clusters_valid(lab):
        return np.nan

    separation, diameter = _separation_and_diameter(distance, lab, between=np.mean, within=np.mean)
    return _ratio(separation, diameter)
