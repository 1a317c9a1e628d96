"""
Observers notified by KLIC while it runs.

Observers never influence the result; they report progress and write
diagnostic plots at fixed checkpoints of a fit.
"""

import numpy as np
import pandas as pd
from typing import List, Optional
from tqdm import tqdm

from .metrics.selection import SelectionResult
from .plotting import plot_similarity_matrix, plot_selection_scores


class KLICObserver:
    """
    Base observer with one no-op hook per checkpoint.

    View indices passed to the hooks are zero-based.
    """

    def on_views_checked(self, n_samples: int, n_views: int):
        pass

    def on_views_start(self, n_views: int, search: bool):
        pass

    def on_view_search_start(self, view_index: int, candidate_ks: List[int]):
        pass

    def on_candidate_built(self, k: int):
        pass

    def on_candidates_scored(self, selection: SelectionResult, view_index: Optional[int] = None):
        pass

    def on_view_built(self, view_index: int, k: int, kernel: np.ndarray, labels: Optional[np.ndarray] = None):
        pass

    def on_global_start(self, candidate_ks: List[int], search: bool):
        pass

    def on_fusion_done(self, result):
        pass


class ProgressObserver(KLICObserver):
    """
    Console progress: status lines and tqdm progress bars.
    """

    def __init__(self):
        self._bar = None
        self._search = False

    def _close_bar(self):
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def on_views_checked(self, n_samples: int, n_views: int):
        print(f"All {n_views} datasets contain the same number of observations {n_samples}.")
        print("We assume that the observations are the same in each dataset and that they are in the same order.")

    def on_views_start(self, n_views: int, search: bool):
        self._search = search
        if search:
            print("*** Choosing the number of clusters for each dataset ***")
        else:
            print("*** Generating similarity matrices ***")
            self._bar = tqdm(total=n_views, desc="Datasets")

    def on_view_search_start(self, view_index: int, candidate_ks: List[int]):
        print(f"Dataset {view_index + 1}")
        self._bar = tqdm(total=len(candidate_ks), desc=f"Dataset {view_index + 1}", unit='K')

    def on_candidate_built(self, k: int):
        if self._bar is not None:
            self._bar.update(1)

    def on_candidates_scored(self, selection: SelectionResult, view_index: Optional[int] = None):
        self._close_bar()
        if view_index is None:
            print(f"Global K = {selection.best_k}")
        else:
            print(f"K = {selection.best_k}")

    def on_view_built(self, view_index: int, k: int, kernel: np.ndarray, labels: Optional[np.ndarray] = None):
        if not self._search and self._bar is not None:
            self._bar.update(1)
            if self._bar.n >= self._bar.total:
                self._close_bar()

    def on_global_start(self, candidate_ks: List[int], search: bool):
        self._close_bar()
        self._search = search
        if search:
            print("*** Choosing the number of clusters for the global clustering ***")
            self._bar = tqdm(total=len(candidate_ks), desc="Global", unit='K')
        else:
            print("*** Finding the global clustering ***")

    def on_fusion_done(self, result):
        self._close_bar()


class PlotObserver(KLICObserver):
    """
    Writes PNG diagnostics next to ``file_name``:

    - ``<file_name>_dataset<i>.png`` and ``<file_name>_global.png``: validation
      indices against the candidate number of clusters
    - ``<file_name>_consensusMatrix<i>.png``: consensus kernel of view i
    - ``<file_name>_weightedConsensusMatrix.png``: fused kernel with the global
      cluster labels and any extra annotations
    """

    def __init__(self, file_name: str = 'klic', annotations: Optional[pd.DataFrame] = None):
        self.file_name = file_name
        self.annotations = annotations

    def on_candidates_scored(self, selection: SelectionResult, view_index: Optional[int] = None):
        if view_index is None:
            suffix = "_global"
        else:
            suffix = f"_dataset{view_index + 1}"
        plot_selection_scores(selection, file_name=f"{self.file_name}{suffix}.png")

    def on_view_built(self, view_index: int, k: int, kernel: np.ndarray, labels: Optional[np.ndarray] = None):
        file_name = f"{self.file_name}_consensusMatrix{view_index + 1}.png"
        if labels is None:
            plot_similarity_matrix(kernel, file_name=file_name)
        else:
            plot_similarity_matrix(kernel, annotations=pd.DataFrame({'cluster': labels}), file_name=file_name)

    def on_fusion_done(self, result):
        annotations = pd.DataFrame({'cluster': result.global_cluster_labels})
        if self.annotations is not None:
            extra = pd.DataFrame(self.annotations).reset_index(drop=True)
            annotations = pd.concat([annotations, extra], axis=1)

        plot_similarity_matrix(
            result.weighted_km,
            annotations=annotations,
            file_name=f"{self.file_name}_weightedConsensusMatrix.png"
        )
