"""
Initialization from caller-supplied medoid indices.

Useful for warm starts or when the caller already knows good medoids.
"""

from typing import List, Sequence, Union
import numpy as np
from torch import Tensor

from ..base.interfaces import InitializationStrategy, DistanceOracle
from ..utils.validation import validate_medoids


class FromIndicesInit(InitializationStrategy):
    """Initialize from explicit object indices.

    Accepts a list, numpy array or integer tensor of indices. The indices
    are validated against the dataset and copied, so the caller's sequence
    is never modified by later swaps.
    """

    def __init__(self, indices: Union[Sequence[int], Tensor, np.ndarray]):
        """
        Args:
            indices: Initial medoid indices
        """
        self.indices = indices

    def initialize(self, oracle: DistanceOracle, n_clusters: int = None,
                   **kwargs) -> List[int]:
        """Validate and copy the stored indices.

        Args:
            oracle: Distance oracle over the dataset (used for validation)
            n_clusters: Expected number of medoids, or None to accept any

        Returns:
            List of object indices
        """
        medoids = validate_medoids(self.indices, oracle.n_objects)

        if n_clusters is not None and len(medoids) != n_clusters:
            raise ValueError(f"Provided {len(medoids)} initial medoids, "
                             f"but n_clusters={n_clusters}")

        return medoids
