"""
pamcluster: K-Medoids clustering with the PAM swap algorithm.

Clusters are represented by actual objects (medoids). Objects can be given
as points, with any point metric, or as a precomputed dissimilarity matrix.

Example usage:
    >>> import torch
    >>> from pamcluster import KMedoids
    >>>
    >>> X = torch.tensor([[0.0, 0.0], [1.0, 0.0], [10.0, 10.0], [11.0, 10.0]])
    >>>
    >>> # Run PAM from explicit initial medoids
    >>> kmedoids = KMedoids(initial_medoids=[0, 2], tolerance=0.001)
    >>> result = kmedoids.process(X)
    >>> result.clusters
    [[0, 1], [2, 3]]
    >>> result.total_cost
    2.0
"""

__version__ = '0.1.0'

# Import main algorithm
from .algorithms.kmedoids import KMedoids
from .base.clustering_base import DEFAULT_TOLERANCE, DEFAULT_ITERMAX

# Import visualization
from .visualization import plot_medoid_clusters

# Convenience imports
from .base import (
    DataType,
    ProcessingState,
    ClusteringResult,
    AlgorithmState
)
from .distances import (
    SquaredEuclideanDistance,
    EuclideanDistance,
    ManhattanDistance,
    ChebyshevDistance,
    MinkowskiDistance,
    CanberraDistance,
    ChiSquareDistance,
    UserDefinedDistance,
    get_metric,
    create_distance_oracle
)
from .utils.convergence import ConvergenceWarning

__all__ = [
    # Algorithm
    'KMedoids',
    'DEFAULT_TOLERANCE',
    'DEFAULT_ITERMAX',

    # Core data structures
    'DataType',
    'ProcessingState',
    'ClusteringResult',
    'AlgorithmState',
    'ConvergenceWarning',

    # Metrics and oracles
    'SquaredEuclideanDistance',
    'EuclideanDistance',
    'ManhattanDistance',
    'ChebyshevDistance',
    'MinkowskiDistance',
    'CanberraDistance',
    'ChiSquareDistance',
    'UserDefinedDistance',
    'get_metric',
    'create_distance_oracle',

    # Visualization
    'plot_medoid_clusters',

    # Version
    '__version__'
]
