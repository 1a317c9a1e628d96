"""
Localised multiple kernel k-means.

This module provides the LocalizedMultipleKernelKMeans class, which clusters
observations described by several kernels while learning, for every
observation, how much each kernel contributes to its similarities.
"""

import numpy as np
import warnings
from typing import Optional, Sequence, Union
from scipy.optimize import minimize
from sklearn.cluster import KMeans

from ..exceptions import ShapeError
from ..kernels import combine_kernels
from .kernel_kmeans import top_eigenvectors, normalise_rows


class LocalizedMultipleKernelKMeans:
    """
    Localised multiple kernel k-means with one weight per observation and kernel.

    The algorithm alternates between two steps:
    - with the weights Theta fixed, the relaxed cluster indicators H are the
      top ``n_clusters`` eigenvectors of the combined kernel
      ``K_Theta = sum_m (theta_m theta_m^T) * K_m``;
    - with H fixed, Theta solves the quadratic program
      ``min sum_m theta_m^T ((I - H H^T) * K_m) theta_m`` subject to every
      row of Theta lying on the probability simplex.

    After the last iteration the rows of H are normalised and discretised
    with k-means to obtain the cluster labels.

    The weight step hands all n_samples * n_kernels weights to scipy's SLSQP
    as one dense problem, whose cost grows roughly with the cube of that
    number. A few hundred observations take seconds per iteration; keep
    ``tol`` set so that converged weights stop the loop early.

    Attributes:
    -----------
    labels_ : np.ndarray
        Cluster labels in 1..n_clusters.
    theta_ : np.ndarray
        Weight matrix of shape (n_samples, n_kernels), rows summing to one.
    objective_ : List[float]
        Value of ``tr(K_Theta) - tr(H^T K_Theta H)`` after every iteration.
    n_iter_ : int
        Number of iterations run.
    """

    def __init__(
        self,
        n_clusters: int = 2,
        max_iter: int = 100,
        tol: Optional[float] = 1e-6,
        n_init: int = 10,
        random_state: Optional[int] = None
    ):
        """
        Initialize the LocalizedMultipleKernelKMeans class.

        Parameters:
        -----------
        n_clusters : int, default=2
            Number of clusters.

        max_iter : int, default=100
            Maximum number of alternating iterations.

        tol : float, optional, default=1e-6
            Stop early once the largest change in Theta between two
            iterations falls below this value. If None, all ``max_iter``
            iterations are run.

        n_init : int, default=10
            Number of k-means restarts used for the final discretisation.

        random_state : int, optional
            Random seed for the k-means discretisation.
        """
        if n_clusters < 1:
            raise ValueError(f"n_clusters must be >= 1, got {n_clusters}")
        if max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {max_iter}")

        self.n_clusters = int(n_clusters)
        self.max_iter = int(max_iter)
        self.tol = tol
        self.n_init = n_init
        self.random_state = random_state

        self.labels_ = None
        self.theta_ = None
        self.objective_ = []
        self.n_iter_ = 0
        self.is_fitted_ = False

    def fit(self, kernels: Union[np.ndarray, Sequence[np.ndarray]]) -> 'LocalizedMultipleKernelKMeans':
        """
        Fit the model to a stack of kernels.

        Parameters:
        -----------
        kernels : Union[np.ndarray, Sequence[np.ndarray]]
            Kernels of shape (n_kernels, n_samples, n_samples).

        Returns:
        --------
        self : LocalizedMultipleKernelKMeans
            Returns self for method chaining.
        """
        kernels = np.asarray(kernels, dtype=float)
        if kernels.ndim != 3 or kernels.shape[1] != kernels.shape[2]:
            raise ShapeError(f"kernels must have shape (n_kernels, n_samples, n_samples), got {kernels.shape}")

        n_kernels, n_samples, _ = kernels.shape
        if self.n_clusters > n_samples:
            raise ValueError(f"n_clusters={self.n_clusters} exceeds the number of samples {n_samples}")

        theta = np.full((n_samples, n_kernels), 1.0 / n_kernels)
        combined = combine_kernels(kernels, theta)
        self.objective_ = []

        for iteration in range(self.max_iter):
            H = top_eigenvectors(combined, self.n_clusters)
            new_theta = self._solve_weights(kernels, H, theta)

            change = np.max(np.abs(new_theta - theta))
            theta = new_theta
            combined = combine_kernels(kernels, theta)
            self.objective_.append(float(np.trace(combined) - np.trace(H.T @ combined @ H)))
            self.n_iter_ = iteration + 1

            if self.tol is not None and change < self.tol:
                break

        kmeans = KMeans(
            n_clusters=self.n_clusters,
            n_init=self.n_init,
            max_iter=1000,
            random_state=self.random_state
        )
        self.labels_ = kmeans.fit_predict(normalise_rows(H)) + 1
        self.theta_ = theta
        self.is_fitted_ = True

        return self

    def _solve_weights(self, kernels: np.ndarray, H: np.ndarray, theta0: np.ndarray) -> np.ndarray:
        """
        Solve the quadratic program for Theta with H fixed.

        Theta is vectorised column by column, so the quadratic form is block
        diagonal with one ``(I - H H^T) * K_m`` block per kernel.
        """
        n_kernels, n_samples, _ = kernels.shape
        projector = np.eye(n_samples) - H @ H.T
        blocks = [projector * kernels[m] for m in range(n_kernels)]

        def objective(x):
            columns = x.reshape(n_kernels, n_samples)
            return float(sum(columns[m] @ blocks[m] @ columns[m] for m in range(n_kernels)))

        def gradient(x):
            columns = x.reshape(n_kernels, n_samples)
            return np.concatenate([2.0 * blocks[m] @ columns[m] for m in range(n_kernels)])

        # Row sums of Theta equal one
        A = np.tile(np.eye(n_samples), (1, n_kernels))
        constraints = [{
            'type': 'eq',
            'fun': lambda x: A @ x - 1.0,
            'jac': lambda x: A
        }]

        result = minimize(
            objective,
            theta0.T.ravel(),
            jac=gradient,
            method='SLSQP',
            bounds=[(0.0, 1.0)] * (n_samples * n_kernels),
            constraints=constraints,
            options={'maxiter': 200}
        )
        if not result.success:
            warnings.warn(f"Weight optimisation did not converge: {result.message}", RuntimeWarning)

        return np.clip(result.x.reshape(n_kernels, n_samples).T, 0.0, None)

    def fit_predict(self, kernels: Union[np.ndarray, Sequence[np.ndarray]]) -> np.ndarray:
        """Fit on the kernels and return the cluster labels."""
        return self.fit(kernels).labels_

    def __repr__(self) -> str:
        return (f"LocalizedMultipleKernelKMeans(n_clusters={self.n_clusters}, "
                f"max_iter={self.max_iter}, fitted={self.is_fitted_})")
