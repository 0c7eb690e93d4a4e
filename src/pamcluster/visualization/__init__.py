"""Visualization utilities for clustering results."""

from .plot_clusters import plot_medoid_clusters

__all__ = [
    'plot_medoid_clusters'
]
