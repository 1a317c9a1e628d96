"""
Plotting module for fuseclust.

This module provides visualization tools for similarity matrices and for
the choice of the number of clusters.
"""

from .similarity import plot_similarity_matrix, plot_selection_scores

__all__ = [
    'plot_similarity_matrix',
    'plot_selection_scores',
]
