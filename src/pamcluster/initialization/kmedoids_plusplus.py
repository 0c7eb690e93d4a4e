"""
K-Medoids++ initialization strategy.

The K-means++ seeding rule applied to objects: each new medoid is drawn
with probability proportional to its distance from the nearest medoid
chosen so far, so initial medoids tend to be spread apart.
"""

from typing import List, Optional
import math
import torch

from ..base.interfaces import InitializationStrategy, DistanceOracle
from ..utils.validation import check_n_clusters


class KMedoidsPlusPlusInit(InitializationStrategy):
    """K-means++ style seeding over a distance oracle.

    Algorithm:
    1. Choose first medoid uniformly at random
    2. For each remaining medoid:
       - Take the distance of each object to its nearest chosen medoid
       - Sample candidates with probability proportional to that distance
       - Keep the candidate that lowers the total distance the most
    """

    def __init__(self, n_local_trials: Optional[int] = None,
                 generator: Optional[torch.Generator] = None):
        """
        Args:
            n_local_trials: Number of candidates to try for each medoid.
                           If None, uses 2 + log(k) as in sklearn
            generator: Optional torch generator for reproducible draws
        """
        self.n_local_trials = n_local_trials
        self.generator = generator

    def initialize(self, oracle: DistanceOracle, n_clusters: int,
                   **kwargs) -> List[int]:
        """Select initial medoids.

        Args:
            oracle: Distance oracle over the dataset
            n_clusters: Number of medoids

        Returns:
            List of distinct object indices
        """
        n_objects = oracle.n_objects
        check_n_clusters(n_clusters, n_objects)

        if self.n_local_trials is None:
            n_local_trials = 2 + int(math.log(n_clusters))
        else:
            n_local_trials = self.n_local_trials

        first = torch.randint(n_objects, (1,), generator=self.generator).item()
        medoids = [first]
        distances = oracle.column(first).clone()
        distances[first] = 0.0

        for _ in range(1, n_clusters):
            weights = distances.clone()
            weights[medoids] = 0.0
            total = weights.sum()

            if total <= 0:
                # Every remaining object coincides with a medoid
                taken = set(medoids)
                pick = next(i for i in range(n_objects) if i not in taken)
            else:
                candidates = torch.multinomial(weights / total, n_local_trials,
                                               replacement=True, generator=self.generator)
                best_potential = float('inf')
                pick = None
                for candidate in candidates.tolist():
                    if candidate in medoids:
                        continue
                    potential = torch.minimum(distances, oracle.column(candidate)).sum().item()
                    if potential < best_potential:
                        best_potential = potential
                        pick = candidate

            medoids.append(pick)
            distances = torch.minimum(distances, oracle.column(pick))
            distances[pick] = 0.0

        return medoids
