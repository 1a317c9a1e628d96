import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from fuseclust.metrics import maximise_silhouette
from fuseclust.plotting import plot_similarity_matrix, plot_selection_scores


def test_plot_similarity_matrix(block_kernel, tmp_path):
    file_name = str(tmp_path / "matrix.png")
    grid = plot_similarity_matrix(block_kernel, file_name=file_name, title="Consensus")

    assert grid is not None
    assert os.path.exists(file_name)


def test_plot_similarity_matrix_with_annotations(block_kernel, true_labels):
    annotations = pd.DataFrame({'cluster': true_labels, 'batch': ['a', 'b'] * 5})
    grid = plot_similarity_matrix(block_kernel, annotations=annotations)

    assert grid is not None
    plt.close('all')


def test_plot_selection_scores(block_kernel, true_labels, tmp_path):
    three = np.array([1, 1, 1, 2, 2, 3, 3, 3, 3, 3])
    selection = maximise_silhouette(
        {2: block_kernel, 3: block_kernel},
        {2: true_labels, 3: three},
        widest_gap=True,
        dunns=True
    )
    file_name = str(tmp_path / "scores.png")
    fig = plot_selection_scores(selection, file_name=file_name)

    assert len(fig.axes) == 3
    assert os.path.exists(file_name)
