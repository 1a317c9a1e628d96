import numpy as np
import pandas as pd
import pytest

from fuseclust.exceptions import ConfigError, DimensionError
from fuseclust.validation import (
    check_views,
    check_k,
    broadcast_k,
    broadcast_parameter,
    check_annotations,
    normalise_view_config,
)


def test_check_views_accepts_equal_row_counts():
    views = [np.zeros((10, 3)), pd.DataFrame(np.ones((10, 2)))]
    arrays = check_views(views)

    assert [array.shape for array in arrays] == [(10, 3), (10, 2)]
    assert all(isinstance(array, np.ndarray) for array in arrays)


def test_check_views_rejects_mismatched_rows():
    views = [np.zeros((10, 3)), np.zeros((10, 2)), np.zeros((9, 4))]
    with pytest.raises(DimensionError, match="same number of rows"):
        check_views(views)


def test_check_views_rejects_wrong_number_of_views():
    with pytest.raises(DimensionError):
        check_views([np.zeros((4, 2)), np.zeros((4, 2))], n_views=3)


def test_check_views_rejects_one_dimensional_view():
    with pytest.raises(DimensionError):
        check_views([np.zeros((4, 2)), np.zeros(4)])


def test_check_views_requires_a_view():
    with pytest.raises(ConfigError):
        check_views([])


def test_dimension_error_is_a_value_error():
    with pytest.raises(ValueError):
        check_views([np.zeros((3, 2)), np.zeros((4, 2))])


def test_single_method_and_distance_are_broadcast():
    config = normalise_view_config(3, cc_cl_methods='pam', cc_dist_hcs='manhattan')

    assert config['cc_cl_methods'] == ['pam', 'pam', 'pam']
    assert config['cc_dist_hcs'] == ['manhattan', 'manhattan', 'manhattan']
    assert config['individual_cl_algorithm'] == ['kkmeans', 'kkmeans', 'kkmeans']


def test_single_distance_is_broadcast_when_all_views_use_hclust():
    config = normalise_view_config(2, cc_cl_methods='hclust', cc_dist_hcs='maximum')
    assert config['cc_dist_hcs'] == ['maximum', 'maximum']


def test_mixed_hclust_requires_one_distance_per_view():
    with pytest.raises(ConfigError, match="distance for each instance of hclust"):
        normalise_view_config(3, cc_cl_methods=['hclust', 'kmeans', 'kmeans'], cc_dist_hcs='euclidean')


def test_mixed_hclust_with_one_distance_per_view():
    config = normalise_view_config(
        2, cc_cl_methods=['hclust', 'kmeans'], cc_dist_hcs=['canberra', 'euclidean']
    )
    assert config['cc_dist_hcs'] == ['canberra', 'euclidean']


@pytest.mark.parametrize("kwargs", [
    {'cc_cl_methods': 'spectral'},
    {'cc_dist_hcs': 'not-a-distance'},
    {'individual_cl_algorithm': 'dbscan'},
    {'individual_cl_algorithm': ['kkmeans', 'unknown']},
    {'cc_cl_methods': ['kmeans', 'kmeans', 'kmeans']},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(ConfigError):
        normalise_view_config(2, **kwargs)


def test_broadcast_parameter():
    assert broadcast_parameter('a', 3, 'name') == ['a', 'a', 'a']
    assert broadcast_parameter(['a', 'b'], 2, 'name') == ['a', 'b']
    with pytest.raises(ConfigError):
        broadcast_parameter(['a', 'b'], 3, 'name')


def test_broadcast_k():
    assert broadcast_k(None, 3, 'individual_k') is None
    assert broadcast_k(4, 3, 'individual_k') == [4, 4, 4]
    assert broadcast_k([2, 3], 2, 'individual_k') == [2, 3]
    assert broadcast_k(np.array([3]), 2, 'individual_k') == [3, 3]
    with pytest.raises(ConfigError):
        broadcast_k([2, 3], 3, 'individual_k')
    with pytest.raises(ConfigError):
        broadcast_k([2, 1], 2, 'individual_k')


@pytest.mark.parametrize("k", [1, 0, 2.5, True, "3"])
def test_check_k_rejects_invalid_values(k):
    with pytest.raises(ConfigError):
        check_k(k, 'global_k')


def test_check_k_passes_valid_values():
    assert check_k(None, 'global_k') is None
    assert check_k(np.int64(3), 'global_k') == 3


@pytest.mark.parametrize("k", [2.0, np.float64(3), "2"])
def test_broadcast_k_rejects_non_integer_scalars(k):
    with pytest.raises(ConfigError):
        broadcast_k(k, 2, 'individual_k')


def test_broadcast_k_accepts_numpy_integers():
    assert broadcast_k(np.int64(3), 2, 'individual_k') == [3, 3]


def test_check_annotations():
    assert check_annotations(None, 10) is None
    annotations = check_annotations(np.array([1, 2] * 5), 10)
    assert isinstance(annotations, pd.DataFrame)
    assert annotations.shape == (10, 1)
    with pytest.raises(ConfigError, match="one row per observation"):
        check_annotations(pd.DataFrame({'batch': ['a'] * 12}), 10)
