"""
Point-to-point dissimilarity metrics.

Every metric works on torch tensors and offers a vectorized pairwise()
for one-to-many evaluation, which the distance oracle relies on.
"""

from typing import Callable, Union
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric


class SquaredEuclideanDistance(DistanceMetric):
    """Squared Euclidean distance ||x - y||².

    Default metric for K-Medoids.
    """

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        diff = x - y
        return torch.sum(diff * diff)

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        diff = points - y.unsqueeze(0)
        return torch.sum(diff * diff, dim=1)

    def __repr__(self) -> str:
        return "SquaredEuclideanDistance()"


class EuclideanDistance(DistanceMetric):
    """Euclidean distance ||x - y||."""

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        diff = x - y
        return torch.sqrt(torch.sum(diff * diff))

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        diff = points - y.unsqueeze(0)
        return torch.sqrt(torch.sum(diff * diff, dim=1))

    def __repr__(self) -> str:
        return "EuclideanDistance()"


class ManhattanDistance(DistanceMetric):
    """Manhattan (L1) distance."""

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        return torch.sum(torch.abs(x - y))

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        return torch.sum(torch.abs(points - y.unsqueeze(0)), dim=1)

    def __repr__(self) -> str:
        return "ManhattanDistance()"


class ChebyshevDistance(DistanceMetric):
    """Chebyshev (L-infinity) distance."""

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        return torch.max(torch.abs(x - y))

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        return torch.max(torch.abs(points - y.unsqueeze(0)), dim=1).values

    def __repr__(self) -> str:
        return "ChebyshevDistance()"


class MinkowskiDistance(DistanceMetric):
    """Minkowski distance of order p."""

    def __init__(self, p: float = 2.0):
        """
        Args:
            p: Order of the norm, must be >= 1
        """
        if p < 1:
            raise ValueError(f"Minkowski order must be >= 1, got {p}")
        self.p = float(p)

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        return torch.sum(torch.abs(x - y) ** self.p) ** (1.0 / self.p)

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        return torch.sum(torch.abs(points - y.unsqueeze(0)) ** self.p, dim=1) ** (1.0 / self.p)

    def __repr__(self) -> str:
        return f"MinkowskiDistance(p={self.p})"


class CanberraDistance(DistanceMetric):
    """Canberra distance sum(|x - y| / (|x| + |y|)).

    Coordinates where both values are zero contribute nothing.
    """

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        return self.pairwise(x.unsqueeze(0), y)[0]

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        num = torch.abs(points - y.unsqueeze(0))
        den = torch.abs(points) + torch.abs(y).unsqueeze(0)
        terms = torch.where(den > 0, num / torch.where(den > 0, den, torch.ones_like(den)),
                            torch.zeros_like(num))
        return terms.sum(dim=1)

    def __repr__(self) -> str:
        return "CanberraDistance()"


class ChiSquareDistance(DistanceMetric):
    """Chi-square distance sum((x - y)² / (|x| + |y|))."""

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        return self.pairwise(x.unsqueeze(0), y)[0]

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        diff = points - y.unsqueeze(0)
        den = torch.abs(points) + torch.abs(y).unsqueeze(0)
        terms = torch.where(den > 0, diff * diff / torch.where(den > 0, den, torch.ones_like(den)),
                            torch.zeros_like(diff))
        return terms.sum(dim=1)

    def __repr__(self) -> str:
        return "ChiSquareDistance()"


class UserDefinedDistance(DistanceMetric):
    """Wraps an arbitrary (x, y) -> float callable.

    The callable is evaluated once per pair, so pairwise() is a Python loop.
    """

    def __init__(self, func: Callable[[Tensor, Tensor], Union[float, Tensor]]):
        if not callable(func):
            raise TypeError(f"Expected a callable, got {type(func)}")
        self.func = func

    def __call__(self, x: Tensor, y: Tensor) -> Tensor:
        return torch.as_tensor(self.func(x, y), dtype=x.dtype, device=x.device)

    def pairwise(self, points: Tensor, y: Tensor) -> Tensor:
        return torch.stack([self(x, y) for x in points])

    def __repr__(self) -> str:
        return f"UserDefinedDistance({getattr(self.func, '__name__', repr(self.func))})"


_METRICS = {
    'euclidean_square': SquaredEuclideanDistance,
    'sqeuclidean': SquaredEuclideanDistance,
    'euclidean': EuclideanDistance,
    'manhattan': ManhattanDistance,
    'cityblock': ManhattanDistance,
    'chebyshev': ChebyshevDistance,
    'minkowski': MinkowskiDistance,
    'canberra': CanberraDistance,
    'chi_square': ChiSquareDistance,
}


def get_metric(metric: Union[str, DistanceMetric, Callable, None] = None,
               **kwargs) -> DistanceMetric:
    """Resolve a metric specification to a DistanceMetric.

    Args:
        metric: None (squared Euclidean), a registered name, a DistanceMetric
            instance, or a plain (x, y) -> float callable
        **kwargs: Constructor arguments for named metrics (e.g. p for minkowski)

    Returns:
        DistanceMetric instance
    """
    if metric is None:
        return SquaredEuclideanDistance()
    if isinstance(metric, DistanceMetric):
        return metric
    if isinstance(metric, str):
        key = metric.lower()
        if key not in _METRICS:
            raise ValueError(f"Unknown metric: {metric}. "
                             f"Available: {sorted(_METRICS)}")
        return _METRICS[key](**kwargs)
    if callable(metric):
        return UserDefinedDistance(metric)
    raise TypeError(f"Cannot build a metric from {type(metric)}")
