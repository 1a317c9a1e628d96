"""
FuseClust: integrative clustering of observations described by several views.

Each view is summarised into a consensus matrix, the consensus matrices are
turned into kernels and fused with localised multiple kernel k-means, which
learns one weight per observation and per view.

Individual modules can be imported directly:
    from fuseclust import KLIC, klic
    from fuseclust.consensus import ConsensusClustering, consensus_matrix
    from fuseclust.clustering import KernelKMeans, LocalizedMultipleKernelKMeans
    from fuseclust.kernels import spectrum_shift, combine_kernels
    from fuseclust.metrics import maximise_silhouette
    from fuseclust.plotting import plot_similarity_matrix
"""

__version__ = "0.0.1"

from .exceptions import (
    DimensionError,
    ConfigError,
    ShapeError,
    EmptyCandidateSetError,
)
from .klic import KLIC, KLICResult, klic
from .observers import KLICObserver, ProgressObserver, PlotObserver

__all__ = [
    'KLIC',
    'KLICResult',
    'klic',
    'KLICObserver',
    'ProgressObserver',
    'PlotObserver',
    'DimensionError',
    'ConfigError',
    'ShapeError',
    'EmptyCandidateSetError',
]
