"""Clustering algorithm implementations."""

from .kmedoids import KMedoids

__all__ = [
    'KMedoids'
]
