"""
Core data structures for PAM clustering.

This module provides the containers passed between components: the input
representation flag, the processing states, per-iteration snapshots and the
final clustering result.
"""

from typing import Optional, List, Tuple, Dict, Any, Union
from enum import Enum
import torch
from torch import Tensor
from dataclasses import dataclass, field


class DataType(Enum):
    """How the rows of an input dataset are interpreted."""

    POINTS = 'points'
    DISTANCE_MATRIX = 'distance_matrix'

    @classmethod
    def parse(cls, value: Union['DataType', str]) -> 'DataType':
        """Accept either a member or its string value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown data type: {value!r}. "
                         f"Expected one of {[m.value for m in cls]}")


class ProcessingState(Enum):
    """States of one process() call."""

    INITIALIZING = 'initializing'
    ITERATING = 'iterating'
    CONVERGED = 'converged'
    MAX_ITER_REACHED = 'max_iter_reached'

    @property
    def is_terminal(self) -> bool:
        return self in (ProcessingState.CONVERGED, ProcessingState.MAX_ITER_REACHED)


@dataclass
class AlgorithmState:
    """Snapshot of the algorithm after one iteration.

    Used for convergence checking, cost tracking and debugging.
    """
    iteration: int
    medoids: List[int]
    objective_value: float
    max_change: float

    # Swap accepted in this iteration as (cluster position, new medoid index)
    swap: Optional[Tuple[int, int]] = None
    swap_cost: float = 0.0
    converged: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def swap_applied(self) -> bool:
        return self.swap is not None


@dataclass
class ClusteringResult:
    """Output of a K-Medoids run.

    A caller may create an empty instance and hand it to process(); it is
    filled only when processing completes.
    """

    # Member indices per cluster, medoid first
    clusters: List[List[int]] = field(default_factory=list)
    medoids: List[int] = field(default_factory=list)
    labels: Optional[Tensor] = None   # (n,) positions into medoids
    total_cost: float = 0.0
    n_iter: int = 0
    status: Optional[ProcessingState] = None
    cost_history: List[float] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.status is ProcessingState.CONVERGED

    @property
    def n_clusters(self) -> int:
        return len(self.medoids)

    def get_clusters(self) -> List[List[int]]:
        return self.clusters

    def get_medoids(self) -> List[int]:
        return self.medoids

    def get_labels(self) -> Tensor:
        if self.labels is None:
            raise RuntimeError("Result has not been populated yet")
        return self.labels

    def get_total_cost(self) -> float:
        return self.total_cost

    def update_from(self, other: 'ClusteringResult') -> None:
        """Copy all fields of another result into this one."""
        self.clusters = [list(cluster) for cluster in other.clusters]
        self.medoids = list(other.medoids)
        self.labels = other.labels.clone() if other.labels is not None else None
        self.total_cost = other.total_cost
        self.n_iter = other.n_iter
        self.status = other.status
        self.cost_history = list(other.cost_history)

    def to(self, device: torch.device) -> 'ClusteringResult':
        """Return a copy with labels moved to the given device."""
        result = ClusteringResult()
        result.update_from(self)
        if result.labels is not None:
            result.labels = result.labels.to(device)
        return result
