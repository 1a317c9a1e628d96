"""
Metrics module for fuseclust.

This module provides internal clustering validation indices and the choice
of the number of clusters based on them.
"""

from .metrics import silhouette_scoring, widest_gap_scoring, dunn_scoring, dunn2_scoring
from .selection import SelectionResult, maximise_silhouette

__all__ = [
    'silhouette_scoring',
    'widest_gap_scoring',
    'dunn_scoring',
    'dunn2_scoring',
    'SelectionResult',
    'maximise_silhouette',
]
