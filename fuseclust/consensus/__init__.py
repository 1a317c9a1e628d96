"""
Consensus module for fuseclust.

This module computes consensus matrices by clustering random subsamples of
a dataset many times.
"""

from .consensus import (
    ConsensusClustering,
    consensus_matrix,
    resolve_distance,
    CONSENSUS_METHODS,
)

__all__ = [
    'ConsensusClustering',
    'consensus_matrix',
    'resolve_distance',
    'CONSENSUS_METHODS',
]
