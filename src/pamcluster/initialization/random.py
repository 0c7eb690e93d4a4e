"""
Random initialization strategy for medoid clustering.

Selects random objects from the dataset as initial medoids.
"""

from typing import List, Optional
import torch

from ..base.interfaces import InitializationStrategy, DistanceOracle
from ..utils.validation import check_n_clusters


class RandomInit(InitializationStrategy):
    """Random initialization by selecting objects from the dataset.

    Selects n_clusters distinct objects uniformly at random.
    """

    def __init__(self, generator: Optional[torch.Generator] = None):
        """
        Args:
            generator: Optional torch generator for reproducible draws
        """
        self.generator = generator

    def initialize(self, oracle: DistanceOracle, n_clusters: int,
                   **kwargs) -> List[int]:
        """Pick n_clusters distinct random objects.

        Args:
            oracle: Distance oracle over the dataset
            n_clusters: Number of medoids

        Returns:
            List of object indices
        """
        n_objects = oracle.n_objects
        check_n_clusters(n_clusters, n_objects)

        indices = torch.randperm(n_objects, generator=self.generator)[:n_clusters]
        return indices.tolist()
