"""
Choice of the number of clusters by internal validation.

Every candidate is a (similarity matrix, labeling) pair keyed by its number
of clusters K. Candidates are scored on the distance ``1 - similarity``;
the chosen K maximises the silhouette, ties going to the smallest K.
"""

import numpy as np
import pandas as pd
from typing import Mapping, Optional

from ..exceptions import EmptyCandidateSetError
from ..kernels import kernel_to_distance
from .metrics import silhouette_scoring, widest_gap_scoring, dunn_scoring, dunn2_scoring

# Decimal places used to decide whether two scores are tied
SCORE_DECIMALS = 12


class SelectionResult:
    """
    Outcome of a model selection over candidate numbers of clusters.

    Attributes:
    -----------
    scores : pd.DataFrame
        One row per candidate K (index named 'K'); a 'silhouette' column plus
        one column per additional index that was computed.
    ranking : List[int]
        All candidate K sorted by decreasing silhouette, ties by increasing K,
        NaN scores last.
    optimal_k : List[int]
        Every K attaining the maximum silhouette, in increasing order.
    best_by_index : Dict[str, int]
        Best K for each computed index ('widest_gap' is minimised, the
        others maximised).
    """

    def __init__(self, scores: pd.DataFrame):
        self.scores = scores

        silhouette = scores['silhouette'].round(SCORE_DECIMALS)
        self.ranking = sorted(
            scores.index.tolist(),
            key=lambda k: (np.isnan(silhouette[k]), -np.nan_to_num(silhouette[k], nan=0.0), k)
        )

        if silhouette.isna().all():
            self.optimal_k = [self.ranking[0]]
        else:
            best = silhouette.max()
            self.optimal_k = sorted(k for k in scores.index if silhouette[k] == best)

        self.best_by_index = {}
        for column in scores.columns:
            values = scores[column].round(SCORE_DECIMALS)
            if values.isna().all():
                continue
            target = values.min() if column == 'widest_gap' else values.max()
            self.best_by_index[column] = int(min(k for k in scores.index if values[k] == target))

    @property
    def best_k(self) -> int:
        """Chosen number of clusters."""
        return int(self.ranking[0])

    def __repr__(self) -> str:
        return (f"SelectionResult(best_k={self.best_k}, optimal_k={self.optimal_k}, "
                f"candidates={self.scores.index.tolist()})")


def maximise_silhouette(
    kernels: Mapping[int, np.ndarray],
    labels: Mapping[int, np.ndarray],
    max_k: Optional[int] = None,
    widest_gap: bool = False,
    dunns: bool = False,
    dunn2s: bool = False
) -> SelectionResult:
    """
    Choose the number of clusters that maximises the silhouette.

    Parameters:
    -----------
    kernels : Mapping[int, np.ndarray]
        Similarity matrix of every candidate, keyed by its number of clusters.
    labels : Mapping[int, np.ndarray]
        Cluster labels of every candidate, keyed like ``kernels``.
    max_k : int, optional
        Largest number of clusters considered. Candidates outside
        [2, max_k] are ignored. Defaults to the largest candidate.
    widest_gap : bool, default=False
        Whether to compute the widest within-cluster gap as well.
    dunns : bool, default=False
        Whether to compute Dunn's index as well.
    dunn2s : bool, default=False
        Whether to compute the alternative Dunn index as well.

    Returns:
    --------
    SelectionResult
        Scores of every candidate and the ranking of their K.

    Raises:
    -------
    EmptyCandidateSetError
        If no candidate K lies in [2, max_k].
    ValueError
        If ``kernels`` and ``labels`` are keyed differently.
    """
    if set(kernels) != set(labels):
        raise ValueError("kernels and labels must be keyed by the same numbers of clusters")
    if max_k is None:
        max_k = max(kernels) if len(kernels) > 0 else 1

    candidates = sorted(k for k in kernels if 2 <= k <= max_k)
    if len(candidates) == 0:
        raise EmptyCandidateSetError(
            f"No candidate number of clusters between 2 and {max_k}; max_k must be at least 2"
        )

    indices = {'silhouette': silhouette_scoring}
    if widest_gap:
        indices['widest_gap'] = widest_gap_scoring
    if dunns:
        indices['dunn'] = dunn_scoring
    if dunn2s:
        indices['dunn2'] = dunn2_scoring

    rows = []
    for k in candidates:
        distance = kernel_to_distance(kernels[k])
        lab = np.asarray(labels[k])
        rows.append({name: index(distance, lab) for name, index in indices.items()})

    scores = pd.DataFrame(rows, index=pd.Index(candidates, name='K'), columns=list(indices.keys()))
    return SelectionResult(scores)
