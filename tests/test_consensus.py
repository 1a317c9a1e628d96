import numpy as np
import pytest
from sklearn.metrics import adjusted_rand_score

from fuseclust.clustering import KernelKMeans
from fuseclust.consensus import ConsensusClustering, consensus_matrix, resolve_distance
from fuseclust.exceptions import ConfigError


@pytest.mark.parametrize("method", ['kmeans', 'hclust', 'pam'])
def test_consensus_matrix_of_separated_groups(two_group_views, true_labels, method):
    matrix = consensus_matrix(two_group_views[0], 2, n_resamples=20, method=method, random_state=0)

    assert matrix.shape == (10, 10)
    assert np.allclose(matrix, matrix.T)
    assert np.all(np.diag(matrix) == 1.0)
    assert np.all((matrix >= 0) & (matrix <= 1))
    assert np.allclose(matrix[:5, :5], 1.0)
    assert np.allclose(matrix[5:, 5:], 1.0)
    assert np.allclose(matrix[:5, 5:], 0.0)

    labels = KernelKMeans(n_clusters=2, random_state=0).fit_predict(matrix)
    assert adjusted_rand_score(true_labels, labels) == pytest.approx(1.0)


def test_consensus_is_reproducible(two_group_views):
    first = consensus_matrix(two_group_views[1], 3, n_resamples=15, random_state=4)
    second = consensus_matrix(two_group_views[1], 3, n_resamples=15, random_state=4)
    assert np.array_equal(first, second)


def test_selection_counts_follow_p_item(two_group_views):
    model = ConsensusClustering(n_clusters=2, n_resamples=10, p_item=0.8, random_state=0)
    model.fit(two_group_views[0])

    # Every subsample holds ceil(0.8 * 10) = 8 observations
    assert np.diag(model.selection_counts_).sum() == 10 * 8
    assert np.allclose(model.get_distance_matrix(), 1.0 - model.consensus_matrix_)


def test_full_subsamples(two_group_views):
    model = ConsensusClustering(n_clusters=2, n_resamples=3, p_item=1.0, random_state=0)
    model.fit(two_group_views[0])
    assert np.all(model.selection_counts_ == 3)


def test_unknown_method():
    with pytest.raises(ConfigError):
        ConsensusClustering(method='spectral')


def test_invalid_p_item():
    with pytest.raises(ValueError):
        ConsensusClustering(p_item=0.0)


def test_distance_must_be_fitted_first():
    with pytest.raises(ValueError):
        ConsensusClustering().get_distance_matrix()


def test_resolve_distance():
    assert resolve_distance('euclidean') == 'euclidean'
    assert resolve_distance('manhattan') == 'cityblock'
    assert resolve_distance('maximum') == 'chebyshev'
    assert resolve_distance('cosine') == 'cosine'
    with pytest.raises(ConfigError):
        resolve_distance('nope')
