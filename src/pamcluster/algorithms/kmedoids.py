"""
K-Medoids clustering algorithm (PAM).

Partitioning Around Medoids implemented using the modular framework:
nearest-medoid assignment alternating with a best-improvement swap search.
"""

from typing import Optional, Sequence, Union, Callable
import torch
from torch import Tensor
import numpy as np

from ..base.clustering_base import (
    BaseClusteringAlgorithm, DEFAULT_TOLERANCE, DEFAULT_ITERMAX, _resolve_device
)
from ..base.interfaces import DistanceMetric, DistanceOracle
from ..base.data_structures import DataType, ClusteringResult
from ..assignments.medoid import NearestMedoidAssignment
from ..updates.swap import PAMSwapUpdater
from ..distances.metrics import get_metric
from ..distances.oracle import create_distance_oracle
from ..initialization.from_indices import FromIndicesInit
from ..initialization.random import RandomInit
from ..initialization.kmedoids_plusplus import KMedoidsPlusPlusInit
from ..utils.convergence import SwapConvergence
from ..utils.metrics import TotalDeviationObjective
from ..utils.validation import check_random_state, validate_data


class KMedoids(BaseClusteringAlgorithm):
    """K-Medoids clustering with the PAM swap algorithm.

    Each cluster is represented by one of the input objects (its medoid).
    Works on coordinates with any point metric, or on a precomputed
    dissimilarity matrix. One full swap pass costs O(k (n - k)^2).

    Parameters
    ----------
    initial_medoids : sequence of int, optional
        Indices of the initial medoids. Required unless n_clusters is given.
    n_clusters : int, optional
        Number of clusters when medoids are chosen by `init`.
    tolerance : float, default=0.001
        Stop once no object's distance to its medoid changes by this much
    max_iter : int, default=100
        Maximum number of swap iterations
    metric : str, DistanceMetric or callable, default=squared Euclidean
        Point metric, ignored for distance matrices
    init : {'random', 'k-medoids++'}, default='random'
        Medoid selection when initial_medoids is not given
    data_type : {'points', 'distance_matrix'}, default='points'
        Default interpretation of the data passed to process()/fit()
    verbose : int, default=0
        Verbosity level
    random_state : int, optional
        Random seed for initialization
    device : torch.device, optional
        Device for computation (CPU/GPU)
    dtype : torch.dtype, default=torch.float64
        Floating point type of distances

    Attributes
    ----------
    medoid_indices_ : list of int
        Final medoids
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Coordinates of the medoids (points data only)
    labels_ : Tensor of shape (n_samples,)
        Cluster position of every object
    inertia_ : float
        Total dissimilarity to the assigned medoids
    n_iter_ : int
        Number of iterations run
    result_ : ClusteringResult
        Full result of the last run
    """

    def __init__(self,
                 initial_medoids: Optional[Union[Sequence[int], Tensor, np.ndarray]] = None,
                 n_clusters: Optional[int] = None,
                 tolerance: float = DEFAULT_TOLERANCE,
                 max_iter: int = DEFAULT_ITERMAX,
                 metric: Optional[Union[str, DistanceMetric, Callable]] = None,
                 init: str = 'random',
                 data_type: Union[DataType, str] = DataType.POINTS,
                 verbose: int = 0,
                 random_state: Optional[int] = None,
                 device: Optional[torch.device] = None,
                 dtype: torch.dtype = torch.float64):
        """Initialize K-Medoids algorithm."""
        if initial_medoids is None and n_clusters is None:
            raise ValueError("Either initial_medoids or n_clusters must be given")

        if n_clusters is None:
            n_clusters = len(initial_medoids)

        super().__init__(
            n_clusters=n_clusters,
            max_iter=max_iter,
            tol=tolerance,
            verbose=verbose,
            random_state=random_state,
            device=device,
            dtype=dtype
        )
        self.initial_medoids = initial_medoids
        self.metric = get_metric(metric)
        self.init = init
        self.data_type = DataType.parse(data_type)

    @property
    def tolerance(self) -> float:
        return self.tol

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        self.tol = value

    def _create_oracle(self, data: Tensor, data_type: DataType) -> DistanceOracle:
        return create_distance_oracle(data, data_type, self.metric)

    def _create_components(self, oracle: DistanceOracle) -> None:
        """Create PAM specific components."""
        self.assignment_strategy = NearestMedoidAssignment(oracle)
        self.update_strategy = PAMSwapUpdater(oracle, self.assignment_strategy)

        # Initialization
        if self.initial_medoids is not None:
            self.initialization_strategy = FromIndicesInit(self.initial_medoids)
        else:
            generator = check_random_state(self.random_state)
            if self.init == 'random':
                self.initialization_strategy = RandomInit(generator)
            elif self.init == 'k-medoids++':
                self.initialization_strategy = KMedoidsPlusPlusInit(generator=generator)
            else:
                raise ValueError(f"Unknown init method: {self.init}")

        self.convergence_criterion = SwapConvergence(tol=self.tol)
        self.objective = TotalDeviationObjective()

    def process(self, data: Union[Tensor, np.ndarray, list],
                data_type: Optional[Union[DataType, str]] = None,
                result: Optional[ClusteringResult] = None) -> ClusteringResult:
        """Run PAM on data.

        Parameters
        ----------
        data : array-like of shape (n, d) or (n, n)
            Points, or a square dissimilarity matrix
        data_type : {'points', 'distance_matrix'}, optional
            Overrides the data_type given at construction
        result : ClusteringResult, optional
            Filled in place on success

        Returns
        -------
        result : ClusteringResult
            Clusters, medoids, labels, total cost and final status
        """
        data_type = self.data_type if data_type is None else DataType.parse(data_type)
        outcome = self._fit(data, data_type)

        if result is None:
            return outcome
        result.update_from(outcome)
        return result

    def fit(self, X: Union[Tensor, np.ndarray, list], y=None,
            data_type: Optional[Union[DataType, str]] = None) -> 'KMedoids':
        """Fit K-Medoids clustering.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features) or (n_samples, n_samples)
            Training data
        y : Ignored
            Not used, present for API consistency
        data_type : {'points', 'distance_matrix'}, optional
            Overrides the data_type given at construction

        Returns
        -------
        self : KMedoids
            Fitted estimator
        """
        self.process(X, data_type)
        return self

    def fit_predict(self, X: Union[Tensor, np.ndarray, list], y=None,
                    data_type: Optional[Union[DataType, str]] = None) -> Tensor:
        """Fit and return labels."""
        return self.process(X, data_type).labels

    @property
    def cluster_centers_(self) -> Tensor:
        """Coordinates of the medoids."""
        self._check_fitted()
        if self._points is None:
            raise RuntimeError("cluster_centers_ is only available for points data")
        return self._points[self.result_.medoids]

    def predict(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Assign new points to the closest medoid.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            New data to predict

        Returns
        -------
        labels : Tensor of shape (n_samples,)
            Cluster positions
        """
        centers = self.cluster_centers_
        X = validate_data(X, dtype=self.dtype, device=self.device)

        if X.shape[1] != centers.shape[1]:
            raise ValueError(f"Expected {centers.shape[1]} features, got {X.shape[1]}")

        distances = torch.stack([self.metric.pairwise(X, center) for center in centers], dim=1)
        return torch.argmin(distances, dim=1)

    def score(self, X: Union[Tensor, np.ndarray, list], y=None) -> float:
        """Opposite of the total dissimilarity of X to the nearest medoids."""
        centers = self.cluster_centers_
        X = validate_data(X, dtype=self.dtype, device=self.device)
        distances = torch.stack([self.metric.pairwise(X, center) for center in centers], dim=1)
        return -distances.min(dim=1).values.sum().item()

    def get_params(self, deep: bool = True) -> dict:
        """Get parameters (sklearn compatibility)."""
        return {
            'initial_medoids': self.initial_medoids,
            'n_clusters': self.n_clusters,
            'tolerance': self.tol,
            'max_iter': self.max_iter,
            'metric': self.metric,
            'init': self.init,
            'data_type': self.data_type,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device,
            'dtype': self.dtype
        }

    def set_params(self, **params) -> 'KMedoids':
        """Set parameters, normalised the same way as in __init__.

        New initial_medoids also reset n_clusters to their count, unless
        n_clusters is passed in the same call.
        """
        if 'metric' in params:
            params['metric'] = get_metric(params['metric'])
        if 'data_type' in params:
            params['data_type'] = DataType.parse(params['data_type'])
        if 'device' in params:
            params['device'] = _resolve_device(params['device'])
        if params.get('initial_medoids') is not None and 'n_clusters' not in params:
            params['n_clusters'] = len(params['initial_medoids'])

        super().set_params(**params)

        if self.initial_medoids is None and self.n_clusters is None:
            raise ValueError("Either initial_medoids or n_clusters must be given")
        return self

    def __repr__(self) -> str:
        return (f"KMedoids(n_clusters={self.n_clusters}, tolerance={self.tol}, "
                f"max_iter={self.max_iter}, metric={self.metric!r})")
