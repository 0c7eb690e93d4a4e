"""Assignment strategies for medoid clustering."""

from .medoid import NearestMedoidAssignment

__all__ = [
    'NearestMedoidAssignment'
]
