"""
Core interfaces for the PAM clustering components.

This module defines the abstract base classes that all components must implement,
so that the estimator can be assembled from interchangeable parts.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List
import torch
from torch import Tensor


class DistanceMetric(ABC):
    """Abstract base class for point-to-point dissimilarities.

    A metric must be non-negative, symmetric and zero on equal inputs.
    """

    @abstractmethod
    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        """Dissimilarity between two (d,) points, as a 0-dim tensor."""
        pass

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        """Dissimilarities from every row of points to y.

        Args:
            points: (n, d) tensor of points
            y: (d,) tensor

        Returns:
            (n,) tensor of distances
        """
        return torch.stack([self(x, y) for x in points])


class DistanceOracle(ABC):
    """Index-based distance lookup over a fixed set of objects."""

    @property
    @abstractmethod
    def n_objects(self) -> int:
        """Number of objects the oracle answers for."""
        pass

    @abstractmethod
    def distance(self, i: int, j: int) -> float:
        """Dissimilarity between objects i and j."""
        pass

    @abstractmethod
    def column(self, j: int) -> Tensor:
        """(n,) tensor of dissimilarities from every object to object j."""
        pass

    def to_matrix(self) -> Tensor:
        """Materialize the full (n, n) dissimilarity matrix."""
        return torch.stack([self.column(j) for j in range(self.n_objects)], dim=1)


class AssignmentStrategy(ABC):
    """Abstract base class for object-to-medoid assignment."""

    @abstractmethod
    def update_clusters(self, medoids: List[int]) -> float:
        """Assign every object to a medoid.

        Args:
            medoids: Current medoid indices

        Returns:
            Maximum change of an object's distance to its medoid
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Drop all per-call scratch state."""
        pass


class ParameterUpdater(ABC):
    """Abstract base class for medoid update strategies."""

    @abstractmethod
    def update(self, medoids: List[int], **kwargs) -> float:
        """Update medoids in place given the current assignment.

        Returns:
            Cost change of the applied update
        """
        pass


class InitializationStrategy(ABC):
    """Abstract base class for initial medoid selection."""

    @abstractmethod
    def initialize(self, oracle: DistanceOracle, n_clusters: int,
                   **kwargs) -> List[int]:
        """Select initial medoids.

        Args:
            oracle: Distance oracle over the dataset
            n_clusters: Number of medoids to select

        Returns:
            List of distinct object indices
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class ClusteringObjective(ABC):
    """Abstract base class for clustering objective functions."""

    @abstractmethod
    def compute(self, oracle: DistanceOracle, medoids: List[int],
                labels: Tensor) -> float:
        """Compute objective function value.

        Args:
            oracle: Distance oracle over the dataset
            medoids: Medoid indices
            labels: (n,) positions into medoids

        Returns:
            Scalar objective value
        """
        pass

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """Whether to minimize (True) or maximize (False) this objective."""
        pass
