"""Utility functions for PAM clustering."""

from .convergence import (
    ConvergenceWarning,
    SwapConvergence,
    ProcessingStateMachine
)

from .metrics import (
    total_deviation,
    silhouette_score,
    TotalDeviationObjective
)

from .validation import (
    validate_data,
    validate_distance_matrix,
    validate_medoids,
    check_n_clusters,
    check_random_state
)

__all__ = [
    # Convergence
    'ConvergenceWarning',
    'SwapConvergence',
    'ProcessingStateMachine',

    # Metrics
    'total_deviation',
    'silhouette_score',
    'TotalDeviationObjective',

    # Validation
    'validate_data',
    'validate_distance_matrix',
    'validate_medoids',
    'check_n_clusters',
    'check_random_state'
]
