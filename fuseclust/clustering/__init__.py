"""
Clustering module for fuseclust.

This module provides the single-view clustering primitives applied to
consensus kernels and the localised multiple kernel k-means used to fuse
them, with sklearn-style interfaces.
"""

from .kernel_kmeans import KernelKMeans
from .lmkkmeans import LocalizedMultipleKernelKMeans
from .partitioning import hierarchical_labels, pam_labels
from .strategies import CLUSTERING_STRATEGIES, get_strategy, cluster_kernel

__all__ = [
    'KernelKMeans',
    'LocalizedMultipleKernelKMeans',
    'hierarchical_labels',
    'pam_labels',
    'CLUSTERING_STRATEGIES',
    'get_strategy',
    'cluster_kernel',
]
