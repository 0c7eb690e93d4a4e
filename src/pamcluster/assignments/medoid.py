"""
Nearest-medoid assignment for PAM clustering.

Assigns every object to its closest medoid and caches, per object, the
distance to the nearest and to the second-nearest medoid. The swap search
reads these caches to price a candidate swap without rescanning medoids.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, DistanceOracle


class NearestMedoidAssignment(AssignmentStrategy):
    """Hard assignment of objects to the nearest medoid.

    After update_clusters():
    - labels[i] is the position (in the medoid list) of object i's medoid
    - distance_first[i] is the distance to that medoid (0 for medoids)
    - distance_second[i] is the distance to the next closest medoid
      (+inf when there is a single medoid)

    Ties go to the medoid that comes first in the medoid list. A medoid is
    always labelled with its own position, even if another medoid sits at
    distance zero.
    """

    def __init__(self, oracle: DistanceOracle):
        """
        Args:
            oracle: Distance oracle over the dataset
        """
        super().__init__()
        self.oracle = oracle
        self.n_clusters = 0
        self.labels: Optional[Tensor] = None
        self.distance_first: Optional[Tensor] = None
        self.distance_second: Optional[Tensor] = None

    def update_clusters(self, medoids: List[int]) -> float:
        """Recompute the assignment for the given medoids.

        Args:
            medoids: Medoid indices, in cluster order

        Returns:
            Maximum absolute change of any object's distance to its medoid
            since the previous call (+inf on the first call)
        """
        n_clusters = len(medoids)

        # (n, k) distances from every object to every medoid
        distances = torch.stack([self.oracle.column(m) for m in medoids], dim=1)

        labels = torch.argmin(distances, dim=1)
        distance_first = torch.gather(distances, 1, labels.unsqueeze(1)).squeeze(1)

        if n_clusters > 1:
            masked = distances.clone()
            masked.scatter_(1, labels.unsqueeze(1), float('inf'))
            distance_second = masked.min(dim=1).values
        else:
            distance_second = torch.full_like(distance_first, float('inf'))

        # Medoids own their cluster; their second distance is the closest other medoid
        for position, index in enumerate(medoids):
            labels[index] = position
            distance_first[index] = 0.0
            if n_clusters > 1:
                row = distances[index].clone()
                row[position] = float('inf')
                distance_second[index] = row.min()

        if self.distance_first is None or self.distance_first.shape != distance_first.shape:
            max_change = float('inf')
        else:
            max_change = (distance_first - self.distance_first).abs().max().item()

        self.n_clusters = n_clusters
        self.labels = labels
        self.distance_first = distance_first
        self.distance_second = distance_second

        return max_change

    def total_cost(self) -> float:
        """Sum of distances from every object to its medoid."""
        if self.distance_first is None:
            raise RuntimeError("update_clusters() must be called first")
        return self.distance_first.sum().item()

    def build_clusters(self, medoids: List[int]) -> List[List[int]]:
        """Membership lists per cluster: the medoid, then members by index."""
        if self.labels is None:
            raise RuntimeError("update_clusters() must be called first")

        clusters = [[index] for index in medoids]
        for index, position in enumerate(self.labels.tolist()):
            if index != medoids[position]:
                clusters[position].append(index)
        return clusters

    def reset(self) -> None:
        self.n_clusters = 0
        self.labels = None
        self.distance_first = None
        self.distance_second = None
