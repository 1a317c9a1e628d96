from sklearn.datasets import make_blobs
from sklearn.metrics import adjusted_rand_score
import numpy as np

from fuseclust import KLIC
from fuseclust.plotting import plot_similarity_matrix

# Set random seed for reproducibility
rng = np.random.RandomState(42)

# Three views of the same 150 observations; the third only carries noise
X, y = make_blobs(n_samples=150, n_features=4, centers=3, cluster_std=1.0, random_state=0)
views = [
    X[:, :2],
    X[:, 2:] + rng.normal(scale=0.5, size=(150, 2)),
    rng.normal(size=(150, 5)),
]

model = KLIC(
    individual_max_k=5,
    global_max_k=5,
    n_resamples=50,
    max_iter=10,
    scale=True,
    random_state=42
)
labels = model.fit_predict(views)

print(model.best_k_, model.global_k_)
print(model.global_selection_.scores)
print("ARI:", adjusted_rand_score(y, labels))

# Average weight of every view; the noise view should get the least
print(model.weights_.mean(axis=0))

plot_similarity_matrix(model.weighted_km_, annotations=labels, file_name="klic_weighted_kernel.png")
