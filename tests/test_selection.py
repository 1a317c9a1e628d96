import numpy as np
import pytest

from fuseclust.exceptions import EmptyCandidateSetError
from fuseclust.metrics import maximise_silhouette, SelectionResult


def _candidates(block_kernel, true_labels):
    kernels = {2: block_kernel, 3: block_kernel, 4: block_kernel}
    labels = {
        2: true_labels,
        3: np.array([1, 1, 1, 2, 2, 3, 3, 3, 3, 3]),
        4: np.array([1, 1, 2, 2, 2, 3, 3, 4, 4, 4]),
    }
    return kernels, labels


def test_best_k_maximises_silhouette(block_kernel, true_labels):
    kernels, labels = _candidates(block_kernel, true_labels)
    selection = maximise_silhouette(kernels, labels, max_k=4)

    assert isinstance(selection, SelectionResult)
    assert selection.best_k == 2
    assert selection.ranking[0] == 2
    assert sorted(selection.ranking) == [2, 3, 4]
    assert list(selection.scores.index) == [2, 3, 4]
    assert selection.scores.loc[2, 'silhouette'] == pytest.approx(1.0)


def test_ties_go_to_the_smallest_k(block_kernel, true_labels):
    kernels = {5: block_kernel, 3: block_kernel, 4: block_kernel}
    labels = {5: true_labels, 3: true_labels, 4: true_labels}

    selection = maximise_silhouette(kernels, labels, max_k=5)

    assert selection.best_k == 3
    assert selection.optimal_k == [3, 4, 5]
    assert selection.ranking == [3, 4, 5]


def test_selection_is_deterministic(block_kernel, true_labels):
    kernels, labels = _candidates(block_kernel, true_labels)
    first = maximise_silhouette(kernels, labels, max_k=4, widest_gap=True, dunns=True, dunn2s=True)
    second = maximise_silhouette(kernels, labels, max_k=4, widest_gap=True, dunns=True, dunn2s=True)

    assert first.ranking == second.ranking
    assert first.scores.equals(second.scores)


def test_candidates_above_max_k_are_ignored(block_kernel, true_labels):
    kernels, labels = _candidates(block_kernel, true_labels)
    selection = maximise_silhouette(kernels, labels, max_k=3)
    assert list(selection.scores.index) == [2, 3]


def test_optional_indices(block_kernel, true_labels):
    kernels, labels = _candidates(block_kernel, true_labels)

    selection = maximise_silhouette(kernels, labels, max_k=4, widest_gap=True, dunns=True, dunn2s=True)

    assert list(selection.scores.columns) == ['silhouette', 'widest_gap', 'dunn', 'dunn2']
    assert selection.best_by_index['silhouette'] == 2
    assert selection.best_by_index['widest_gap'] == 2
    assert selection.best_by_index['dunn'] == 2


def test_only_silhouette_by_default(block_kernel, true_labels):
    kernels, labels = _candidates(block_kernel, true_labels)
    selection = maximise_silhouette(kernels, labels)
    assert list(selection.scores.columns) == ['silhouette']


def test_degenerate_labeling_ranks_last(block_kernel, true_labels):
    kernels = {2: block_kernel, 3: block_kernel}
    labels = {2: np.ones(10, dtype=int), 3: np.array([1, 1, 1, 1, 1, 2, 2, 2, 3, 3])}

    selection = maximise_silhouette(kernels, labels, max_k=3)

    assert np.isnan(selection.scores.loc[2, 'silhouette'])
    assert selection.ranking == [3, 2]
    assert selection.best_k == 3


@pytest.mark.parametrize("max_k", [1, 0])
def test_empty_candidate_set(block_kernel, true_labels, max_k):
    with pytest.raises(EmptyCandidateSetError):
        maximise_silhouette({2: block_kernel}, {2: true_labels}, max_k=max_k)


def test_no_candidates_at_all():
    with pytest.raises(EmptyCandidateSetError):
        maximise_silhouette({}, {})


def test_mismatched_candidates(block_kernel, true_labels):
    with pytest.raises(ValueError):
        maximise_silhouette({2: block_kernel}, {3: true_labels})
