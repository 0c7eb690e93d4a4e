"""
Clustering quality metrics that work from dissimilarities alone.

Medoid clustering never needs coordinates, so these metrics take a
distance oracle or a precomputed (n, n) matrix instead of points.
"""

from typing import List, Union
import torch
from torch import Tensor

from ..base.interfaces import DistanceOracle, ClusteringObjective


def total_deviation(distances: Union[DistanceOracle, Tensor],
                    medoids: List[int], labels: Tensor) -> float:
    """Sum of dissimilarities from every object to its assigned medoid.

    Args:
        distances: Distance oracle or (n, n) distance matrix
        medoids: Medoid indices
        labels: (n,) positions into medoids

    Returns:
        Total deviation (lower is better)
    """
    total = 0.0
    for position, medoid in enumerate(medoids):
        mask = labels == position
        if not mask.any():
            continue
        if isinstance(distances, DistanceOracle):
            column = distances.column(medoid)
        else:
            column = distances[:, medoid]
        members = column[mask].clone()
        # A medoid costs nothing against itself
        members[torch.nonzero(mask).squeeze(1) == medoid] = 0.0
        total += members.sum().item()
    return total


def silhouette_score(distance_matrix: Tensor, labels: Tensor) -> float:
    """Compute mean Silhouette Coefficient from a distance matrix.

    The Silhouette Coefficient is calculated using the mean intra-cluster
    distance (a) and the mean nearest-cluster distance (b) for each sample.
    The Silhouette Coefficient for a sample is (b - a) / max(a, b).
    Samples in singleton clusters score 0.

    Args:
        distance_matrix: (n, n) dissimilarities
        labels: (n,) cluster labels

    Returns:
        Mean silhouette coefficient in [-1, 1]
    """
    n_samples = distance_matrix.shape[0]
    cluster_ids = torch.unique(labels)

    if len(cluster_ids) == 1:
        return 0.0

    silhouette_values = torch.zeros(n_samples, dtype=distance_matrix.dtype)

    for i in range(n_samples):
        same_cluster = labels == labels[i]
        same_cluster[i] = False

        if same_cluster.sum() == 0:
            continue

        a = distance_matrix[i, same_cluster].mean()

        b_values = []
        for k in cluster_ids:
            if k == labels[i]:
                continue
            other_cluster = labels == k
            b_values.append(distance_matrix[i, other_cluster].mean())

        b = torch.stack(b_values).min()
        denom = torch.max(a, b)
        if denom > 0:
            silhouette_values[i] = (b - a) / denom

    return silhouette_values.mean().item()


class TotalDeviationObjective(ClusteringObjective):
    """K-Medoids objective: sum of dissimilarities to the assigned medoid."""

    def compute(self, oracle: DistanceOracle, medoids: List[int],
                labels: Tensor) -> float:
        return total_deviation(oracle, medoids, labels)

    @property
    def minimize(self) -> bool:
        return True
