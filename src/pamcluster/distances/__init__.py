"""Distance metrics and distance oracles for medoid clustering."""

from .metrics import (
    SquaredEuclideanDistance,
    EuclideanDistance,
    ManhattanDistance,
    ChebyshevDistance,
    MinkowskiDistance,
    CanberraDistance,
    ChiSquareDistance,
    UserDefinedDistance,
    get_metric
)
from .oracle import (
    PointDistanceOracle,
    MatrixDistanceOracle,
    create_distance_oracle
)

__all__ = [
    # Point metrics
    'SquaredEuclideanDistance',
    'EuclideanDistance',
    'ManhattanDistance',
    'ChebyshevDistance',
    'MinkowskiDistance',
    'CanberraDistance',
    'ChiSquareDistance',
    'UserDefinedDistance',
    'get_metric',

    # Oracles
    'PointDistanceOracle',
    'MatrixDistanceOracle',
    'create_distance_oracle'
]
