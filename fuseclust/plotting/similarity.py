import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from typing import Optional, Union, Dict, Any

from ..metrics.selection import SelectionResult


def _annotation_colors(annotations: pd.DataFrame) -> pd.DataFrame:
    """
    Map every annotation column to a categorical palette.

    Parameters
    ----------
    annotations : pd.DataFrame
        One row per observation, one column per annotation.

    Returns
    -------
    pd.DataFrame
        Same shape as ``annotations`` with RGB tuples as values.
    """
    colors = {}
    for column in annotations.columns:
        categories = pd.Categorical(annotations[column]).categories
        palette = dict(zip(categories, sns.color_palette('tab10', n_colors=max(len(categories), 1))))
        colors[column] = annotations[column].map(palette)
    return pd.DataFrame(colors, index=annotations.index)


def plot_similarity_matrix(
    matrix: np.ndarray,
    annotations: Optional[Union[pd.DataFrame, pd.Series, np.ndarray]] = None,
    file_name: Optional[str] = None,
    cluster_rows: bool = True,
    cluster_cols: bool = True,
    cmap: str = 'Blues',
    title: Optional[str] = None,
    figsize: tuple = (8, 8),
    **kwargs: Dict[str, Any]
):
    """
    Plot a similarity matrix as a heatmap, optionally annotated.

    When annotations are given the observations are ordered by the first
    annotation column instead of being clustered.

    Parameters
    ----------
    matrix : np.ndarray
        Similarity matrix of shape (n_samples, n_samples).
    annotations : pd.DataFrame, pd.Series or np.ndarray, optional
        One row per observation, e.g. cluster labels. Shown as coloured bars.
    file_name : str, optional
        If given, the figure is saved to this path and closed.
    cluster_rows, cluster_cols : bool, default=True
        Whether to reorder rows/columns by hierarchical clustering. Ignored
        when annotations are given.
    cmap : str, default='Blues'
        Colormap of the heatmap.
    title : str, optional
        Figure title.
    figsize : tuple, default=(8, 8)
        Figure size.
    **kwargs
        Passed on to seaborn.clustermap.

    Returns
    -------
    seaborn.matrix.ClusterGrid
        The grid holding the figure.
    """
    matrix = np.asarray(matrix, dtype=float)
    names = [str(i + 1) for i in range(matrix.shape[0])]
    data = pd.DataFrame(matrix, index=names, columns=names)

    row_colors = None
    if annotations is not None:
        if isinstance(annotations, np.ndarray):
            annotations = pd.DataFrame({'cluster': annotations})
        elif isinstance(annotations, pd.Series):
            annotations = annotations.to_frame()
        annotations = annotations.copy()
        annotations.index = names

        order = annotations.sort_values(by=annotations.columns[0], kind='stable').index
        data = data.loc[order, order]
        row_colors = _annotation_colors(annotations.loc[order])
        cluster_rows = cluster_cols = False

    grid = sns.clustermap(
        data,
        row_cluster=cluster_rows,
        col_cluster=cluster_cols,
        row_colors=row_colors,
        cmap=cmap,
        method='average',
        xticklabels=False,
        yticklabels=False,
        figsize=figsize,
        **kwargs
    )
    if title is not None:
        grid.figure.suptitle(title)

    if file_name is not None:
        grid.figure.savefig(file_name, dpi=150, bbox_inches='tight')
        plt.close(grid.figure)

    return grid


def plot_selection_scores(
    selection: SelectionResult,
    file_name: Optional[str] = None,
    title: Optional[str] = None,
    figsize: Optional[tuple] = None
):
    """
    Plot every validation index against the candidate number of clusters.

    Parameters
    ----------
    selection : SelectionResult
        Result of maximise_silhouette.
    file_name : str, optional
        If given, the figure is saved to this path and closed.
    title : str, optional
        Figure title.
    figsize : tuple, optional
        Figure size; defaults to 4 inches per index.

    Returns
    -------
    matplotlib.figure.Figure
        The figure.
    """
    scores = selection.scores
    n_indices = len(scores.columns)
    if figsize is None:
        figsize = (4 * n_indices, 3.5)

    fig, axes = plt.subplots(1, n_indices, figsize=figsize, squeeze=False)
    for ax, column in zip(axes[0], scores.columns):
        ax.plot(scores.index, scores[column], marker='o', color='black')
        best_k = selection.best_by_index.get(column)
        if best_k is not None:
            ax.axvline(best_k, color='tab:red', linestyle='--', alpha=0.7)
        ax.set_xlabel('Number of clusters')
        ax.set_ylabel(column.replace('_', ' '))
        ax.set_xticks(scores.index)
        ax.grid(True, alpha=0.3)

    if title is not None:
        fig.suptitle(title)
    fig.tight_layout()

    if file_name is not None:
        fig.savefig(file_name, dpi=150, bbox_inches='tight')
        plt.close(fig)

    return fig
