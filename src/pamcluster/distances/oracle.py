"""
Distance oracles: index-based dissimilarity lookup.

Two variants cover the supported input representations:
- PointDistanceOracle evaluates a metric between coordinate rows on demand
- MatrixDistanceOracle reads a precomputed square matrix

The variant is fixed once per process() call by create_distance_oracle().
"""

from typing import Union
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric, DistanceOracle
from ..base.data_structures import DataType
from .metrics import SquaredEuclideanDistance


class PointDistanceOracle(DistanceOracle):
    """Computes distances between coordinate vectors on every call.

    Nothing is cached: a swap pass only touches one distance column per
    candidate, so storing the (n, n) matrix is not required.
    """

    def __init__(self, points: Tensor, metric: DistanceMetric = None):
        """
        Args:
            points: (n, d) tensor of points, referenced and never modified
            metric: Point metric (squared Euclidean if None)
        """
        assert points.dim() == 2
        self.points = points
        self.metric = metric if metric is not None else SquaredEuclideanDistance()

    @property
    def n_objects(self) -> int:
        return self.points.shape[0]

    def distance(self, i: int, j: int) -> float:
        assert 0 <= i < self.n_objects and 0 <= j < self.n_objects
        # Same code path as column() so both lookups agree bit for bit
        return float(self.metric.pairwise(self.points[i:i + 1], self.points[j])[0])

    def column(self, j: int) -> Tensor:
        assert 0 <= j < self.n_objects
        return self.metric.pairwise(self.points, self.points[j])

    def __repr__(self) -> str:
        return f"PointDistanceOracle(n_objects={self.n_objects}, metric={self.metric!r})"


class MatrixDistanceOracle(DistanceOracle):
    """Looks distances up in a precomputed (n, n) matrix."""

    def __init__(self, matrix: Tensor):
        """
        Args:
            matrix: (n, n) symmetric dissimilarity matrix
        """
        assert matrix.dim() == 2 and matrix.shape[0] == matrix.shape[1]
        self.matrix = matrix

    @property
    def n_objects(self) -> int:
        return self.matrix.shape[0]

    def distance(self, i: int, j: int) -> float:
        assert 0 <= i < self.n_objects and 0 <= j < self.n_objects
        return float(self.matrix[i, j])

    def column(self, j: int) -> Tensor:
        assert 0 <= j < self.n_objects
        return self.matrix[:, j]

    def to_matrix(self) -> Tensor:
        return self.matrix

    def __repr__(self) -> str:
        return f"MatrixDistanceOracle(n_objects={self.n_objects})"


def create_distance_oracle(data: Tensor,
                           data_type: Union[DataType, str] = DataType.POINTS,
                           metric: DistanceMetric = None) -> DistanceOracle:
    """Build the oracle matching the data representation.

    Args:
        data: (n, d) points or (n, n) distance matrix
        data_type: DataType member or its string value
        metric: Point metric, ignored for distance matrices

    Returns:
        DistanceOracle over data
    """
    data_type = DataType.parse(data_type)
    if data_type is DataType.POINTS:
        return PointDistanceOracle(data, metric)
    return MatrixDistanceOracle(data)
