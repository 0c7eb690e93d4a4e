"""
Demo of K-Medoids (PAM) clustering.

This example shows how to:
1. Generate blob data with a few far outliers
2. Run PAM on points and on a precomputed distance matrix
3. Compare initialization strategies and plot the result
"""

import torch
import matplotlib.pyplot as plt

# Add parent directory to path for imports
import sys
sys.path.append('..')

from pamcluster import KMedoids, ManhattanDistance, plot_medoid_clusters
from pamcluster.distances import PointDistanceOracle
from pamcluster.utils.metrics import silhouette_score
from sklearn.metrics import adjusted_rand_score, normalized_mutual_info_score


def generate_blob_data(n_points_per_cluster=100, n_outliers=6, spread=0.6):
    """Three 2D blobs plus a handful of distant outliers.

    Outliers get label -1 and are left out of the scores.
    """
    torch.manual_seed(42)

    centers = torch.tensor([[0.0, 0.0], [6.0, 1.0], [2.5, 6.0]])
    data_list = []
    true_labels = []

    for k, center in enumerate(centers):
        points = center + spread * torch.randn(n_points_per_cluster, 2)
        data_list.append(points)
        true_labels.extend([k] * n_points_per_cluster)

    outliers = (torch.rand(n_outliers, 2) - 0.5) * 40
    data_list.append(outliers)
    true_labels.extend([-1] * n_outliers)

    X = torch.cat(data_list, dim=0).double()
    true_labels = torch.tensor(true_labels)

    # Shuffle
    perm = torch.randperm(len(X))
    return X[perm], true_labels[perm]


def compute_metrics(true_labels, pred_labels):
    """ARI / NMI on the non-outlier points."""
    mask = true_labels >= 0
    true_np = true_labels[mask].cpu().numpy()
    pred_np = pred_labels[mask].cpu().numpy()
    return adjusted_rand_score(true_np, pred_np), normalized_mutual_info_score(true_np, pred_np)


def main():
    """Run the demo."""
    print("=== K-Medoids (PAM) Clustering Demo ===\n")

    X, true_labels = generate_blob_data()
    print(f"Data: {len(X)} points, {int((true_labels < 0).sum())} outliers\n")

    # 1) Points input, both seeding strategies
    results = {}
    for init in ('random', 'k-medoids++'):
        model = KMedoids(n_clusters=3, init=init, random_state=0, verbose=1, device='cpu')
        result = model.process(X)
        ari, nmi = compute_metrics(true_labels, result.labels)
        results[init] = result
        print(f"[{init}] medoids={result.medoids} cost={result.total_cost:.3f} "
              f"iterations={result.n_iter} status={result.status.value}")
        print(f"[{init}] ARI={ari:.4f} NMI={nmi:.4f}\n")

    # 2) Same run from a precomputed Manhattan distance matrix
    D = PointDistanceOracle(X, ManhattanDistance()).to_matrix()
    matrix_result = KMedoids(initial_medoids=results['k-medoids++'].medoids,
                             device='cpu').process(D, data_type='distance_matrix')
    print(f"[manhattan matrix] medoids={matrix_result.medoids} "
          f"cost={matrix_result.total_cost:.3f}")
    print(f"[manhattan matrix] silhouette={silhouette_score(D, matrix_result.labels):.4f}\n")

    # 3) Plot clusters and cost history
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(13, 5))
    plot_medoid_clusters(X, results['k-medoids++'], ax=ax1, title='PAM (k-medoids++)')

    for init, result in results.items():
        ax2.plot(range(len(result.cost_history)), result.cost_history, marker='o', label=init)
    ax2.set_xlabel('Iteration')
    ax2.set_ylabel('Total cost')
    ax2.set_title('Cost per swap iteration')
    ax2.legend()

    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
