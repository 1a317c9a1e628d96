"""
Kernel learning integrative clustering (KLIC).

This module provides the KLIC class that clusters observations described by
several datasets (views). Each view is summarised into a consensus matrix,
which is made positive semi-definite and used as a kernel; the kernels are
then fused by localised multiple kernel k-means, which learns how much each
view contributes to the similarities of every observation.

When the number of clusters of a view, or of the final clustering, is not
given, every value between 2 and a maximum is tried and the one maximising
the silhouette is kept (ties go to the smallest value).
"""

import numpy as np
import pandas as pd
import warnings
from typing import Any, Dict, List, Optional, Sequence, Union
from sklearn.utils import check_random_state

from .clustering import LocalizedMultipleKernelKMeans, cluster_kernel
from .consensus import consensus_matrix
from .exceptions import EmptyCandidateSetError
from .kernels import spectrum_shift, combine_kernels
from .metrics import SelectionResult, maximise_silhouette
from .observers import KLICObserver, ProgressObserver, PlotObserver
from .utils import scale_view
from .validation import check_views, check_k, check_annotations, broadcast_k, normalise_view_config


class ViewKernel:
    """Consensus kernel retained for one view, with the K it was built at."""

    def __init__(
        self,
        view_index: int,
        k: int,
        kernel: np.ndarray,
        labels: Optional[np.ndarray] = None,
        selection: Optional[SelectionResult] = None
    ):
        self.view_index = view_index
        self.k = k
        self.kernel = kernel
        self.labels = labels
        self.selection = selection

    def __repr__(self) -> str:
        return f"ViewKernel(view_index={self.view_index}, k={self.k}, searched={self.selection is not None})"


class FusionCandidate:
    """Output of localised multiple kernel k-means at one number of clusters."""

    def __init__(self, k: int, labels: np.ndarray, weights: np.ndarray, weighted_km: np.ndarray):
        self.k = k
        self.labels = labels
        self.weights = weights
        self.weighted_km = weighted_km

    def __repr__(self) -> str:
        return f"FusionCandidate(k={self.k})"


class KLICResult:
    """
    Result of a KLIC fit.

    Attributes:
    -----------
    consensus_matrices : np.ndarray
        Kernels of shape (n_views, n_samples, n_samples), one per view.
    weights : np.ndarray
        Weight matrix of shape (n_samples, n_views).
    weighted_km : np.ndarray
        Fused kernel of shape (n_samples, n_samples).
    global_cluster_labels : np.ndarray
        Final cluster labels in 1..K.
    best_k : List[int], optional
        Number of clusters chosen for every view, when it was not given.
    global_k : int, optional
        Number of final clusters, when it was not given.
    """

    def __init__(
        self,
        consensus_matrices: np.ndarray,
        weights: np.ndarray,
        weighted_km: np.ndarray,
        global_cluster_labels: np.ndarray,
        best_k: Optional[List[int]] = None,
        global_k: Optional[int] = None
    ):
        self.consensus_matrices = consensus_matrices
        self.weights = weights
        self.weighted_km = weighted_km
        self.global_cluster_labels = global_cluster_labels
        self.best_k = best_k
        self.global_k = global_k

    def to_dict(self) -> Dict[str, Any]:
        """Result as a dictionary, with optional entries only when they were chosen."""
        output = {
            'consensusMatrices': self.consensus_matrices,
            'weights': self.weights,
            'weightedKM': self.weighted_km,
            'globalClusterLabels': self.global_cluster_labels,
        }
        if self.best_k is not None:
            output['bestK'] = self.best_k
        if self.global_k is not None:
            output['globalK'] = self.global_k
        return output

    def __repr__(self) -> str:
        n_views, n_samples, _ = self.consensus_matrices.shape
        return (f"KLICResult(n_views={n_views}, n_samples={n_samples}, "
                f"best_k={self.best_k}, global_k={self.global_k})")


class KLIC:
    """
    Kernel learning integrative clustering of multiple views.

    Features:
    - One consensus kernel per view, at a given number of clusters or at the
      number maximising the silhouette between 2 and ``individual_max_k``
    - Fusion by localised multiple kernel k-means with per-observation,
      per-view weights
    - Final number of clusters given or chosen between 2 and ``global_max_k``
    - Optional widest-gap and Dunn indices reported next to the silhouette
    - Progress and PNG diagnostics delivered through observers
    """

    def __init__(
        self,
        individual_k: Optional[Union[int, Sequence[int]]] = None,
        individual_max_k: int = 6,
        individual_cl_algorithm: Union[str, Sequence[str]] = 'kkmeans',
        global_k: Optional[int] = None,
        global_max_k: int = 6,
        n_resamples: int = 1000,
        max_iter: int = 100,
        scale: bool = False,
        save_png: bool = False,
        file_name: str = 'klic',
        verbose: bool = True,
        annotations: Optional[pd.DataFrame] = None,
        cc_cl_methods: Union[str, Sequence[str]] = 'kmeans',
        cc_dist_hcs: Union[str, Sequence[str]] = 'euclidean',
        widest_gap: bool = False,
        dunns: bool = False,
        dunn2s: bool = False,
        p_item: float = 0.8,
        random_state: Optional[int] = None,
        observers: Optional[List[KLICObserver]] = None
    ):
        """
        Initialize the KLIC class.

        Parameters:
        -----------
        individual_k : int or sequence of int, optional
            Number of clusters of every view (one value, or one per view).
            If None, every value between 2 and ``individual_max_k`` is tried.

        individual_max_k : int, default=6
            Largest number of clusters tried for a single view.

        individual_cl_algorithm : str or sequence of str, default='kkmeans'
            How candidate consensus kernels are clustered when choosing the
            number of clusters of a view. Options:
            - 'kkmeans': kernel k-means on the kernel
            - 'hclust': average-linkage hierarchical clustering on 1 - kernel
            - 'pam': partitioning around medoids on 1 - kernel

        global_k : int, optional
            Number of final clusters. If None, every value between 2 and
            ``global_max_k`` is tried.

        global_max_k : int, default=6
            Largest number of final clusters tried.

        n_resamples : int, default=1000
            Number of subsamples used by consensus clustering.

        max_iter : int, default=100
            Maximum number of iterations of localised multiple kernel k-means.

        scale : bool, default=False
            Whether to scale every column of every view to zero mean and
            unit variance before consensus clustering.

        save_png : bool, default=False
            Whether to write diagnostic plots (see PlotObserver).

        file_name : str, default='klic'
            Prefix, possibly including a folder, of the diagnostic plots.

        verbose : bool, default=True
            Whether to print progress messages and progress bars.

        annotations : pd.DataFrame, optional
            Extra per-observation annotations added to the final plot.

        cc_cl_methods : str or sequence of str, default='kmeans'
            Consensus clustering method of every view ('kmeans', 'hclust', 'pam').

        cc_dist_hcs : str or sequence of str, default='euclidean'
            Distance used by the consensus clustering of every view. Views
            mixing 'hclust' with other methods need one distance per view.

        widest_gap : bool, default=False
            Whether to compute the widest within-cluster gap as well.

        dunns : bool, default=False
            Whether to compute Dunn's index as well.

        dunn2s : bool, default=False
            Whether to compute the alternative Dunn index as well.

        p_item : float, default=0.8
            Fraction of observations drawn in every consensus subsample.

        random_state : int, optional
            Random seed for reproducible results.

        observers : list of KLICObserver, optional
            Additional observers notified during the fit.
        """
        self.individual_k = individual_k
        self.individual_max_k = individual_max_k
        self.individual_cl_algorithm = individual_cl_algorithm
        self.global_k = global_k
        self.global_max_k = global_max_k
        self.n_resamples = n_resamples
        self.max_iter = max_iter
        self.scale = scale
        self.save_png = save_png
        self.file_name = file_name
        self.verbose = verbose
        self.annotations = annotations
        self.cc_cl_methods = cc_cl_methods
        self.cc_dist_hcs = cc_dist_hcs
        self.widest_gap = widest_gap
        self.dunns = dunns
        self.dunn2s = dunn2s
        self.p_item = p_item
        self.random_state = random_state
        self.observers = observers

        # Results storage
        self.consensus_matrices_ = None
        self.weights_ = None
        self.weighted_km_ = None
        self.labels_ = None
        self.best_k_ = None
        self.global_k_ = None
        self.view_selections_ = None
        self.global_selection_ = None
        self.result_ = None
        self.is_fitted_ = False

    def _build_observers(self, annotations: Optional[pd.DataFrame] = None) -> List[KLICObserver]:
        observers = []
        if self.verbose:
            observers.append(ProgressObserver())
        if self.save_png:
            observers.append(PlotObserver(file_name=self.file_name, annotations=annotations))
        if self.observers is not None:
            observers.extend(self.observers)
        return observers

    def _notify(self, hook: str, *args, **kwargs):
        for observer in self._observers:
            getattr(observer, hook)(*args, **kwargs)

    def _next_seed(self) -> int:
        return int(self._rng.randint(np.iinfo(np.int32).max))

    def _consensus_kernel(self, X: np.ndarray, k: int, method: str, distance: str) -> np.ndarray:
        """Consensus matrix of one view at k clusters, repaired into a kernel."""
        matrix = consensus_matrix(
            X,
            k,
            n_resamples=self.n_resamples,
            method=method,
            distance=distance,
            p_item=self.p_item,
            random_state=self._next_seed()
        )
        return spectrum_shift(matrix)

    def _build_view_kernel(self, view_index: int, X: np.ndarray, k: int, config: Dict[str, List[str]]) -> ViewKernel:
        kernel = self._consensus_kernel(
            X, k, config['cc_cl_methods'][view_index], config['cc_dist_hcs'][view_index]
        )
        return ViewKernel(view_index, k, kernel)

    def _search_view_kernel(self, view_index: int, X: np.ndarray, config: Dict[str, List[str]]) -> ViewKernel:
        """Build one kernel per candidate K and keep the one maximising the silhouette."""
        candidate_ks = list(range(2, self.individual_max_k + 1))
        self._notify('on_view_search_start', view_index, candidate_ks)

        kernels = {}
        labels = {}
        for k in candidate_ks:
            kernels[k] = self._consensus_kernel(
                X, k, config['cc_cl_methods'][view_index], config['cc_dist_hcs'][view_index]
            )
            labels[k] = cluster_kernel(
                kernels[k],
                k,
                strategy=config['individual_cl_algorithm'][view_index],
                random_state=self._next_seed()
            )
            self._notify('on_candidate_built', k)

        selection = maximise_silhouette(
            kernels,
            labels,
            max_k=self.individual_max_k,
            widest_gap=self.widest_gap,
            dunns=self.dunns,
            dunn2s=self.dunn2s
        )
        self._notify('on_candidates_scored', selection, view_index=view_index)

        best_k = selection.best_k
        return ViewKernel(view_index, best_k, kernels[best_k], labels[best_k], selection)

    def _fuse(self, kernels: np.ndarray, k: int) -> FusionCandidate:
        """Localised multiple kernel k-means at k clusters and the resulting weighted kernel."""
        model = LocalizedMultipleKernelKMeans(
            n_clusters=k,
            max_iter=self.max_iter,
            random_state=self._next_seed()
        ).fit(kernels)
        weighted_km = combine_kernels(kernels, model.theta_)
        return FusionCandidate(k, model.labels_, model.theta_, weighted_km)

    def _search_fusion(self, kernels: np.ndarray):
        """Fuse at every candidate K and keep the fusion maximising the silhouette."""
        candidate_ks = list(range(2, self.global_max_k + 1))
        self._notify('on_global_start', candidate_ks, search=True)

        candidates = {}
        for k in candidate_ks:
            candidates[k] = self._fuse(kernels, k)
            self._notify('on_candidate_built', k)

        selection = maximise_silhouette(
            {k: candidate.weighted_km for k, candidate in candidates.items()},
            {k: candidate.labels for k, candidate in candidates.items()},
            max_k=self.global_max_k,
            widest_gap=self.widest_gap,
            dunns=self.dunns,
            dunn2s=self.dunn2s
        )
        self._notify('on_candidates_scored', selection)

        return candidates[selection.best_k], selection

    def fit(self, views: Sequence[Any], n_views: Optional[int] = None) -> 'KLIC':
        """
        Fit KLIC to a set of views of the same observations.

        Parameters:
        -----------
        views : sequence of array-like
            Datasets of shape (n_samples, n_features_m), rows referring to the
            same observations in the same order.
        n_views : int, optional
            Expected number of views.

        Returns:
        --------
        self : KLIC
            Returns self for method chaining.

        Raises:
        -------
        DimensionError
            If the views do not share the number of observations.
        ConfigError
            If the configuration is invalid.
        EmptyCandidateSetError
            If a maximum number of clusters below 2 leaves nothing to choose from.
        """
        views = check_views(views, n_views=n_views)
        n_views = len(views)
        n_samples = views[0].shape[0]
        annotations = check_annotations(self.annotations, n_samples)

        config = normalise_view_config(
            n_views,
            cc_cl_methods=self.cc_cl_methods,
            cc_dist_hcs=self.cc_dist_hcs,
            individual_cl_algorithm=self.individual_cl_algorithm
        )
        individual_k = broadcast_k(self.individual_k, n_views, 'individual_k')
        global_k = check_k(self.global_k, 'global_k')

        self._observers = self._build_observers(annotations)
        self._rng = check_random_state(self.random_state)
        self._notify('on_views_checked', n_samples, n_views)

        search_individual = individual_k is None
        search_global = global_k is None
        if search_individual and self.individual_max_k < 2:
            raise EmptyCandidateSetError(f"individual_max_k must be at least 2, got {self.individual_max_k}")
        if search_global and self.global_max_k < 2:
            raise EmptyCandidateSetError(f"global_max_k must be at least 2, got {self.global_max_k}")

        if search_individual and self.individual_max_k == 2:
            warnings.warn("Since individual_max_k = 2, individual_k is automatically set to 2.", UserWarning)
            individual_k = [2] * n_views
        if search_global and self.global_max_k == 2:
            warnings.warn("Since global_max_k = 2, global_k is automatically set to 2.", UserWarning)
            global_k = 2

        ### Consensus kernels ###
        self._notify('on_views_start', n_views, search=individual_k is None)
        view_kernels = []
        for i, view in enumerate(views):
            X = scale_view(view) if self.scale else view
            if individual_k is None:
                view_kernel = self._search_view_kernel(i, X, config)
            else:
                view_kernel = self._build_view_kernel(i, X, individual_k[i], config)
            view_kernels.append(view_kernel)
            self._notify('on_view_built', i, view_kernel.k, view_kernel.kernel, labels=view_kernel.labels)

        kernels = np.stack([view_kernel.kernel for view_kernel in view_kernels])

        ### Localised multiple kernel k-means ###
        if global_k is None:
            fusion, global_selection = self._search_fusion(kernels)
        else:
            self._notify('on_global_start', [global_k], search=False)
            fusion = self._fuse(kernels, global_k)
            global_selection = None

        result = KLICResult(
            consensus_matrices=kernels,
            weights=fusion.weights,
            weighted_km=fusion.weighted_km,
            global_cluster_labels=fusion.labels,
            best_k=[view_kernel.k for view_kernel in view_kernels] if search_individual else None,
            global_k=fusion.k if search_global else None
        )
        self._notify('on_fusion_done', result)

        self.result_ = result
        self.consensus_matrices_ = result.consensus_matrices
        self.weights_ = result.weights
        self.weighted_km_ = result.weighted_km
        self.labels_ = result.global_cluster_labels
        self.best_k_ = result.best_k
        self.global_k_ = result.global_k
        self.view_selections_ = [view_kernel.selection for view_kernel in view_kernels]
        self.global_selection_ = global_selection
        self.is_fitted_ = True
        return self

    def fit_predict(self, views: Sequence[Any], n_views: Optional[int] = None) -> np.ndarray:
        """Fit KLIC and return the final cluster labels."""
        return self.fit(views, n_views=n_views).labels_

    def __repr__(self) -> str:
        return (f"KLIC(individual_k={self.individual_k}, individual_max_k={self.individual_max_k}, "
                f"global_k={self.global_k}, global_max_k={self.global_max_k}, "
                f"n_resamples={self.n_resamples}, fitted={self.is_fitted_})")


def klic(views: Sequence[Any], n_views: Optional[int] = None, **kwargs) -> KLICResult:
    """
    Kernel learning integrative clustering of multiple views.

    Parameters:
    -----------
    views : sequence of array-like
        Datasets of shape (n_samples, n_features_m) describing the same
        observations in the same order.
    n_views : int, optional
        Expected number of views.
    **kwargs
        Any parameter of KLIC.

    Returns:
    --------
    KLICResult
        Kernels, weights, fused kernel and final labels, plus the chosen
        numbers of clusters when they were not given.

    Examples:
    ---------
    >>> result = klic([data1, data2, data3], individual_k=[4, 4, 4], global_k=4,
    ...               n_resamples=30, max_iter=5)
    >>> result.global_cluster_labels
    """
    return KLIC(**kwargs).fit(views, n_views=n_views).result_
