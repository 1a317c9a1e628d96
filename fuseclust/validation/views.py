"""
Checks on the input views and normalisation of per-view configuration.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional, Sequence, Union

from ..exceptions import DimensionError, ConfigError
from ..clustering.strategies import get_strategy
from ..consensus.consensus import CONSENSUS_METHODS, resolve_distance


def check_views(views: Sequence[Any], n_views: Optional[int] = None) -> List[np.ndarray]:
    """
    Check that all views describe the same number of observations.

    Parameters:
    -----------
    views : Sequence[Any]
        Datasets of shape (n_samples, n_features_m). Anything convertible to
        a two-dimensional numpy array (e.g. a pandas DataFrame) is accepted.
    n_views : int, optional
        Expected number of views.

    Returns:
    --------
    List[np.ndarray]
        The views as float arrays.

    Raises:
    -------
    DimensionError
        If the views do not all have as many rows as the first one, if a view
        is not two-dimensional, or if there are not ``n_views`` of them.
    ConfigError
        If no view is given.
    """
    if views is None or len(views) == 0:
        raise ConfigError("At least one view is required")
    if n_views is not None and len(views) != n_views:
        raise DimensionError(f"Expected {n_views} views, got {len(views)}")

    arrays = [np.asarray(view, dtype=float) for view in views]
    for i, array in enumerate(arrays):
        if array.ndim != 2:
            raise DimensionError(f"View {i + 1} must be two-dimensional, got shape {array.shape}")

    n_samples = arrays[0].shape[0]
    for i, array in enumerate(arrays):
        if array.shape[0] != n_samples:
            raise DimensionError(
                f"All datasets must have the same number of rows: view 1 has {n_samples}, "
                f"view {i + 1} has {array.shape[0]}"
            )

    return arrays


def _as_list(value: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


def broadcast_parameter(value: Union[str, Sequence[str]], n_views: int, name: str) -> List[str]:
    """
    Expand a single value to one value per view.

    Raises:
    -------
    ConfigError
        If a sequence is given whose length is neither 1 nor n_views.
    """
    values = _as_list(value)
    if len(values) == 1:
        return values * n_views
    if len(values) != n_views:
        raise ConfigError(f"{name} must contain 1 or {n_views} values, got {len(values)}")
    return values


def check_k(k: Optional[int], name: str) -> Optional[int]:
    """Check that a number of clusters is an integer >= 2 (None is passed through)."""
    if k is None:
        return None
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 2:
        raise ConfigError(f"{name} must be an integer >= 2, got {k!r}")
    return int(k)


def broadcast_k(k: Optional[Union[int, Sequence[int]]], n_views: int, name: str) -> Optional[List[int]]:
    """
    Expand a number of clusters to one value per view.

    Raises:
    -------
    ConfigError
        If a value is not an integer >= 2 or the number of values is neither
        1 nor n_views.
    """
    if k is None:
        return None
    if np.ndim(k) == 0:
        values = [k] * n_views
    else:
        values = list(k)
        if len(values) == 1:
            values = values * n_views
        elif len(values) != n_views:
            raise ConfigError(f"{name} must contain 1 or {n_views} values, got {len(values)}")

    return [check_k(value, name) for value in values]


def check_annotations(annotations: Optional[Any], n_samples: int) -> Optional[pd.DataFrame]:
    """
    Check that per-observation annotations have one row per observation.

    Raises:
    -------
    ConfigError
        If the number of rows differs from n_samples.
    """
    if annotations is None:
        return None
    annotations = pd.DataFrame(annotations)
    if annotations.shape[0] != n_samples:
        raise ConfigError(f"annotations must have one row per observation: expected {n_samples}, "
                          f"got {annotations.shape[0]}")
    return annotations


def normalise_view_config(
    n_views: int,
    cc_cl_methods: Union[str, Sequence[str]] = 'kmeans',
    cc_dist_hcs: Union[str, Sequence[str]] = 'euclidean',
    individual_cl_algorithm: Union[str, Sequence[str]] = 'kkmeans'
) -> Dict[str, List[str]]:
    """
    Turn the per-view clustering configuration into one entry per view.

    A single consensus clustering method, distance or strategy is used for
    every view. A single distance can only be shared when either every view
    or no view uses hierarchical clustering; mixing 'hclust' with other
    methods requires one distance per view.

    Parameters:
    -----------
    n_views : int
        Number of views.
    cc_cl_methods : Union[str, Sequence[str]], default='kmeans'
        Consensus clustering method of every view ('kmeans', 'hclust', 'pam').
    cc_dist_hcs : Union[str, Sequence[str]], default='euclidean'
        Distance used by the consensus clustering of every view.
    individual_cl_algorithm : Union[str, Sequence[str]], default='kkmeans'
        Strategy used to cluster each candidate consensus kernel
        ('kkmeans', 'hclust', 'pam').

    Returns:
    --------
    Dict[str, List[str]]
        Keys 'cc_cl_methods', 'cc_dist_hcs' and 'individual_cl_algorithm',
        each mapped to a list with one entry per view.

    Raises:
    -------
    ConfigError
        If a name is unknown or a list has the wrong length.
    """
    methods = broadcast_parameter(cc_cl_methods, n_views, 'cc_cl_methods')
    for method in methods:
        if method not in CONSENSUS_METHODS:
            raise ConfigError(f"Unknown consensus clustering method: {method!r}. "
                              f"Available options: {CONSENSUS_METHODS}")

    distances = _as_list(cc_dist_hcs)
    uses_hclust = [method == 'hclust' for method in methods]
    if len(distances) == 1 and (all(uses_hclust) or not any(uses_hclust)):
        distances = distances * n_views
    elif len(distances) != n_views:
        raise ConfigError(
            f"Please specify a distance for each instance of hclust by passing "
            f"a list of length {n_views} to cc_dist_hcs"
        )
    for distance in distances:
        resolve_distance(distance)

    strategies = broadcast_parameter(individual_cl_algorithm, n_views, 'individual_cl_algorithm')
    for strategy in strategies:
        get_strategy(strategy)

    return {
        'cc_cl_methods': methods,
        'cc_dist_hcs': distances,
        'individual_cl_algorithm': strategies,
    }
