"""Base classes and interfaces for PAM clustering.

BaseClusteringAlgorithm lives in base.clustering_base; it depends on utils,
which in turn builds on the interfaces exported here.
"""

from .interfaces import (
    DistanceMetric,
    DistanceOracle,
    AssignmentStrategy,
    ParameterUpdater,
    InitializationStrategy,
    ConvergenceCriterion,
    ClusteringObjective
)

from .data_structures import (
    DataType,
    ProcessingState,
    AlgorithmState,
    ClusteringResult
)

__all__ = [
    # Interfaces
    'DistanceMetric',
    'DistanceOracle',
    'AssignmentStrategy',
    'ParameterUpdater',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'ClusteringObjective',

    # Data structures
    'DataType',
    'ProcessingState',
    'AlgorithmState',
    'ClusteringResult'
]
