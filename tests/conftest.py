import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest


def make_two_groups(n_per_group=5, n_features=3, offset=10.0, noise=0.1, seed=0):
    rng = np.random.RandomState(seed)
    group_a = rng.normal(0.0, noise, size=(n_per_group, n_features))
    group_b = rng.normal(offset, noise, size=(n_per_group, n_features))
    return np.vstack([group_a, group_b])


@pytest.fixture
def true_labels():
    return np.array([1] * 5 + [2] * 5)


@pytest.fixture
def two_group_views():
    """Two views of 10 observations split into two well separated groups of 5."""
    return [
        make_two_groups(n_features=3, seed=0),
        make_two_groups(n_features=5, offset=-8.0, seed=1),
    ]


@pytest.fixture
def block_kernel():
    """Perfect consensus matrix of two groups of 5."""
    kernel = np.zeros((10, 10))
    kernel[:5, :5] = 1.0
    kernel[5:, 5:] = 1.0
    return kernel


@pytest.fixture
def indefinite_matrix():
    rng = np.random.RandomState(3)
    Q, _ = np.linalg.qr(rng.normal(size=(8, 8)))
    eigenvalues = np.array([3.0, 1.0, 0.8, 0.5, 0.4, 0.2, -0.1, -0.3])
    A = Q @ np.diag(eigenvalues) @ Q.T
    return (A + A.T) / 2.0
