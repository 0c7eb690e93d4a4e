"""Initialization strategies for medoid clustering."""

from .random import RandomInit
from .kmedoids_plusplus import KMedoidsPlusPlusInit
from .from_indices import FromIndicesInit

__all__ = [
    'RandomInit',
    'KMedoidsPlusPlusInit',
    'FromIndicesInit'
]
