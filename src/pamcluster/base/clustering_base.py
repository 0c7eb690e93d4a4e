"""
Base class for medoid clustering algorithms.

Provides the common algorithmic skeleton: initialize medoids, then alternate
a medoid update step with a full reassignment until the convergence state
machine reaches a terminal state.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Union
import torch
from torch import Tensor
import numpy as np
import time
import warnings

from .interfaces import (
    DistanceOracle, AssignmentStrategy, ParameterUpdater,
    InitializationStrategy, ConvergenceCriterion, ClusteringObjective
)
from .data_structures import (
    DataType, ProcessingState, AlgorithmState, ClusteringResult
)
from ..utils.convergence import ProcessingStateMachine, ConvergenceWarning
from ..utils.validation import validate_data, validate_distance_matrix


DEFAULT_TOLERANCE = 0.001
DEFAULT_ITERMAX = 100


def _resolve_device(device: Optional[Union[str, torch.device]]) -> torch.device:
    """None or 'auto' picks CUDA when available; CUDA requests fall back to CPU."""
    if device is None or device == 'auto':
        return torch.device('cuda' if torch.cuda.is_available() else 'cpu')

    device = torch.device(device)
    if device.type == 'cuda' and not torch.cuda.is_available():
        warnings.warn("CUDA not available, falling back to CPU")
        return torch.device('cpu')
    return device


class BaseClusteringAlgorithm:
    """Base class implementing the initialize / update / reassign loop.

    Subclasses need to specify:
    - Distance oracle for the input representation
    - Assignment strategy
    - Medoid update strategy
    - Initialization strategy
    - Convergence criterion
    - Objective function
    """

    def __init__(self,
                 n_clusters: Optional[int],
                 max_iter: int = DEFAULT_ITERMAX,
                 tol: float = DEFAULT_TOLERANCE,
                 verbose: int = 0,
                 random_state: Optional[int] = None,
                 device: Optional[Union[str, torch.device]] = None,
                 dtype: torch.dtype = torch.float64):
        """
        Args:
            n_clusters: Number of clusters K
            max_iter: Maximum iterations
            tol: Convergence tolerance
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Random seed for reproducibility
            device: Torch device (None for auto-detect)
            dtype: Floating point type used for distances
        """
        self.n_clusters = n_clusters
        self.max_iter = max_iter
        self.tol = tol
        self.verbose = verbose
        self.random_state = random_state
        self.device = _resolve_device(device)
        self.dtype = dtype

        # These will be set by subclasses
        self.assignment_strategy: Optional[AssignmentStrategy] = None
        self.update_strategy: Optional[ParameterUpdater] = None
        self.initialization_strategy: Optional[InitializationStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.objective: Optional[ClusteringObjective] = None

        # Algorithm state
        self.fitted_ = False
        self.n_iter_ = 0
        self.history_: List[AlgorithmState] = []
        self.result_: Optional[ClusteringResult] = None
        self._points: Optional[Tensor] = None

    @abstractmethod
    def _create_oracle(self, data: Tensor, data_type: DataType) -> DistanceOracle:
        """Create the distance oracle for validated data."""
        pass

    @abstractmethod
    def _create_components(self, oracle: DistanceOracle) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.assignment_strategy
        - self.update_strategy
        - self.initialization_strategy
        - self.convergence_criterion
        - self.objective
        """
        pass

    def _fit(self, X: Union[Tensor, np.ndarray, list],
             data_type: Union[DataType, str]) -> ClusteringResult:
        """Internal fit method running the swap loop to a terminal state."""
        data_type = DataType.parse(data_type)
        X = self._validate_data(X, data_type)

        oracle = self._create_oracle(X, data_type)
        self._create_components(oracle)

        medoids = self.initialization_strategy.initialize(oracle, self.n_clusters)
        machine = ProcessingStateMachine(self.convergence_criterion, self.max_iter)

        if self.verbose:
            print(f"Processing {oracle.n_objects} objects with {len(medoids)} medoids...")

        start_time = time.time()

        self.assignment_strategy.reset()
        self.assignment_strategy.update_clusters(medoids)
        cost = self.assignment_strategy.total_cost()
        cost_history = [cost]
        history = []

        machine.start()

        while not machine.is_terminal:
            iter_start_time = time.time()

            # Update step
            swap_cost = self.update_strategy.update(medoids)
            swap = self.update_strategy.last_swap

            # Assignment step
            max_change = self.assignment_strategy.update_clusters(medoids)
            cost = self.assignment_strategy.total_cost()
            cost_history.append(cost)

            state = machine.advance(swap_applied=swap is not None, max_change=max_change)

            history.append(AlgorithmState(
                iteration=machine.iteration,
                medoids=list(medoids),
                objective_value=cost,
                max_change=max_change,
                swap=swap,
                swap_cost=swap_cost,
                converged=state is ProcessingState.CONVERGED
            ))

            # Logging
            iter_time = time.time() - iter_start_time
            if self.verbose >= 2 or (self.verbose >= 1 and machine.iteration % 10 == 0):
                swap_text = f"swap {swap[1]} -> cluster {swap[0]}" if swap else "no swap"
                print(f"Iteration {machine.iteration:3d}: cost = {cost:.6f} "
                      f"({swap_text}) ({iter_time:.3f}s)")

        total_time = time.time() - start_time

        if self.verbose:
            if machine.state is ProcessingState.CONVERGED:
                print(f"Converged at iteration {machine.iteration}")
            else:
                warnings.warn(f"Failed to converge after {self.max_iter} iterations",
                              ConvergenceWarning)
            print(f"Total processing time: {total_time:.3f}s")

        labels = self.assignment_strategy.labels.clone()
        result = ClusteringResult(
            clusters=self.assignment_strategy.build_clusters(medoids),
            medoids=list(medoids),
            labels=labels,
            total_cost=self.objective.compute(oracle, medoids, labels),
            n_iter=machine.iteration,
            status=machine.state,
            cost_history=cost_history
        )

        # Scratch state does not outlive the call
        self.assignment_strategy.reset()

        self._points = X if data_type is DataType.POINTS else None
        self.n_iter_ = machine.iteration
        self.history_ = history
        self.result_ = result
        self.fitted_ = True
        return result

    def _validate_data(self, X: Union[Tensor, np.ndarray, list],
                       data_type: DataType = DataType.POINTS) -> Tensor:
        """Validate and prepare input data."""
        X = validate_data(X, dtype=self.dtype, device=self.device)

        if data_type is DataType.DISTANCE_MATRIX:
            validate_distance_matrix(X)

        return X

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")

    @property
    def labels_(self) -> Tensor:
        """Cluster position of every object."""
        self._check_fitted()
        return self.result_.labels

    @property
    def medoid_indices_(self) -> List[int]:
        """Final medoid indices."""
        self._check_fitted()
        return self.result_.medoids

    @property
    def inertia_(self) -> float:
        """Get final objective value."""
        self._check_fitted()
        return self.result_.total_cost

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device,
            'dtype': self.dtype
        }

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility)."""
        valid = self.get_params()
        for key, value in params.items():
            if key not in valid:
                raise ValueError(f"Invalid parameter {key!r} for {type(self).__name__}")
            setattr(self, key, value)
        return self
