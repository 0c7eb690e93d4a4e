"""
Cluster visualization utilities.

Plots 2D medoid clustering results with the medoids highlighted.
"""

from typing import Optional, Union, List
from torch import Tensor
import matplotlib.pyplot as plt
from matplotlib import colormaps
import numpy as np

from ..base.data_structures import ClusteringResult


def plot_medoid_clusters(X: Union[Tensor, np.ndarray],
                         result: ClusteringResult,
                         ax: Optional[plt.Axes] = None,
                         colors: Optional[List[str]] = None,
                         alpha: float = 0.7,
                         medoid_marker: str = 'X',
                         medoid_size: int = 200,
                         point_size: int = 50,
                         show_legend: bool = True,
                         title: Optional[str] = None) -> plt.Axes:
    """Plot 2D clustering results.

    Args:
        X: (n, 2) data points
        result: Clustering result for X
        ax: Matplotlib axes (created if None)
        colors: List of colors for clusters
        alpha: Point transparency
        medoid_marker: Marker for medoids
        medoid_size: Size of medoid markers
        point_size: Size of data points
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    X_np = X.detach().cpu().numpy() if isinstance(X, Tensor) else np.asarray(X)

    if X_np.ndim != 2 or X_np.shape[1] != 2:
        raise ValueError(f"Expected (n, 2) points, got shape {X_np.shape}")

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    n_clusters = result.n_clusters

    # Default colors
    if colors is None:
        cmap = colormaps['tab10' if n_clusters <= 10 else 'tab20']
        colors = [cmap(i % cmap.N) for i in range(n_clusters)]

    # Plot each cluster
    for position, members in enumerate(result.clusters):
        ax.scatter(X_np[members, 0], X_np[members, 1],
                   c=[colors[position]],
                   s=point_size,
                   alpha=alpha,
                   edgecolors='black',
                   linewidth=0.5,
                   label=f'Cluster {position}')

    # Plot medoids
    medoids_np = X_np[result.medoids]
    ax.scatter(medoids_np[:, 0], medoids_np[:, 1],
               c='black',
               marker=medoid_marker,
               s=medoid_size,
               edgecolors='white',
               linewidth=2,
               label='Medoids',
               zorder=10)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax
