"""
Input validation utilities.

Everything here runs before any processing starts, so a rejected call
leaves caller-owned structures untouched.
"""

from typing import Optional, Union, List, Sequence
import torch
from torch import Tensor
import numpy as np
import warnings


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: torch.dtype = torch.float64,
                  device: Optional[torch.device] = None,
                  ensure_2d: bool = True,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1,
                  ensure_min_features: int = 1,
                  copy: bool = False) -> Tensor:
    """Validate and convert input data to tensor.

    Args:
        X: Input data (tensor, numpy array, or list)
        dtype: Target data type
        device: Target device
        ensure_2d: Whether to ensure 2D shape
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of samples required
        ensure_min_features: Minimum number of features required
        copy: Whether to force a copy

    Returns:
        Validated tensor

    Raises:
        ValueError: If validation fails
    """
    # Convert to tensor
    if isinstance(X, Tensor):
        if copy or X.dtype != dtype or (device is not None and X.device != device):
            X = X.to(dtype=dtype, device=device, copy=copy)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.ascontiguousarray(X)).to(dtype=dtype, device=device)
    elif isinstance(X, (list, tuple)):
        X = torch.tensor(X, dtype=dtype, device=device)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    # Ensure 2D
    if ensure_2d:
        if X.dim() == 1:
            X = X.unsqueeze(1)
        elif X.dim() != 2:
            raise ValueError(f"Expected 2D array, got {X.dim()}D")

        n_samples, n_features = X.shape

        if n_samples < ensure_min_samples:
            raise ValueError(f"Found {n_samples} samples, but need at least "
                             f"{ensure_min_samples}")

        if n_features < ensure_min_features:
            raise ValueError(f"Found {n_features} features, but need at least "
                             f"{ensure_min_features}")

    # Check for finite values
    if ensure_finite:
        if torch.isnan(X).any():
            raise ValueError("Input contains NaN values")
        if torch.isinf(X).any():
            raise ValueError("Input contains infinite values")

    return X


def validate_distance_matrix(D: Tensor, check_symmetric: bool = True,
                             atol: float = 1e-8) -> Tensor:
    """Check that D can serve as a dissimilarity matrix.

    Args:
        D: (n, n) tensor
        check_symmetric: Warn if D differs noticeably from D.T
        atol: Absolute tolerance of the symmetry check

    Returns:
        D unchanged

    Raises:
        ValueError: If D is not square or has negative entries
    """
    if D.dim() != 2 or D.shape[0] != D.shape[1]:
        raise ValueError(f"Distance matrix must be square, got shape {tuple(D.shape)}")

    if (D < 0).any():
        raise ValueError("Distance matrix contains negative entries")

    if check_symmetric and not torch.allclose(D, D.t(), atol=atol):
        warnings.warn("Distance matrix is not symmetric; it is used as given")

    return D


def validate_medoids(medoids: Union[Sequence[int], Tensor, np.ndarray],
                     n_samples: int) -> List[int]:
    """Validate initial medoid indices.

    Args:
        medoids: Object indices
        n_samples: Number of objects in the dataset

    Returns:
        Fresh list of Python ints

    Raises:
        TypeError: If indices are not integers
        ValueError: If empty, out of range, duplicated, or more than n_samples
    """
    if isinstance(medoids, Tensor):
        if medoids.is_floating_point():
            raise TypeError("Medoid indices must be integers")
        medoids = medoids.reshape(-1).tolist()
    elif isinstance(medoids, np.ndarray):
        if not np.issubdtype(medoids.dtype, np.integer):
            raise TypeError("Medoid indices must be integers")
        medoids = medoids.reshape(-1).tolist()

    medoids = list(medoids)

    for index in medoids:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise TypeError(f"Medoid indices must be integers, got {type(index)}")

    medoids = [int(index) for index in medoids]

    if len(medoids) == 0:
        raise ValueError("At least one initial medoid is required")

    check_n_clusters(len(medoids), n_samples)

    out_of_range = [index for index in medoids if index < 0 or index >= n_samples]
    if out_of_range:
        raise ValueError(f"Medoid indices {out_of_range} are out of range "
                         f"for {n_samples} objects")

    if len(set(medoids)) != len(medoids):
        raise ValueError(f"Initial medoids contain duplicates: {medoids}")

    return medoids


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples

    Raises:
        ValueError: If invalid
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, int):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise ValueError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise ValueError(f"n_clusters ({n_clusters}) cannot be larger than "
                         f"n_samples ({n_samples})")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> Optional[torch.Generator]:
    """Create generator from random state.

    Args:
        random_state: Seed or generator

    Returns:
        Generator or None
    """
    if random_state is None:
        return None
    elif isinstance(random_state, int):
        generator = torch.Generator()
        generator.manual_seed(random_state)
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")
