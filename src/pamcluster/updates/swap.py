"""
PAM swap step: exchange one medoid with one non-medoid object.

For a candidate object c replacing the medoid of cluster m, every object o
contributes (new distance - old distance) to the swap cost:

    o == c                      -> -d1(o)
    o currently in cluster m    -> min(d(o, c), d2(o)) - d1(o)
    any other o                 -> min(d1(o), d(o, c)) - d1(o)

where d1 and d2 are the cached nearest and second-nearest medoid distances.
d2 bounds the best remaining medoid for objects that lose theirs, so no
medoid rescan is needed. All k clusters are priced from a single distance
column per candidate, giving O(k (n - k)^2) per full pass.
"""

from typing import List, Optional, Tuple
import torch
from torch import Tensor

from ..base.interfaces import ParameterUpdater, DistanceOracle
from ..assignments.medoid import NearestMedoidAssignment


NOTHING_TO_SWAP = 0.0


class PAMSwapUpdater(ParameterUpdater):
    """Finds and applies the best cost-reducing medoid swap.

    Candidates are scanned cluster by cluster, and within a cluster by
    ascending object index; the first pair reaching the minimum cost wins.
    A swap is applied only if its cost is strictly negative.
    """

    def __init__(self, oracle: DistanceOracle, assignment: NearestMedoidAssignment):
        """
        Args:
            oracle: Distance oracle over the dataset
            assignment: Assignment whose caches reflect the current medoids
        """
        self.oracle = oracle
        self.assignment = assignment
        self.last_swap: Optional[Tuple[int, int]] = None

    def update(self, medoids: List[int], **kwargs) -> float:
        """Apply the best swap to medoids in place (see swap_medoids)."""
        return self.swap_medoids(medoids)

    def swap_medoids(self, medoids: List[int]) -> float:
        """Search all (cluster, candidate) pairs and commit the best one.

        Args:
            medoids: Current medoid indices, modified in place

        Returns:
            Cost of the applied swap (negative), or NOTHING_TO_SWAP
        """
        self.last_swap = None
        costs = self.swap_cost_grid(medoids)

        if costs.numel() == 0:
            return NOTHING_TO_SWAP

        # argmin returns the first minimum in row-major (cluster-major) order
        flat_index = torch.argmin(costs).item()
        best_cluster, best_candidate = divmod(flat_index, costs.shape[1])
        best_cost = costs[best_cluster, best_candidate].item()

        if best_cost < 0.0:
            medoids[best_cluster] = best_candidate
            self.last_swap = (best_cluster, best_candidate)
            return best_cost

        return NOTHING_TO_SWAP

    def swap_cost_grid(self, medoids: List[int]) -> Tensor:
        """(k, n) swap costs; entries for current medoids are +inf."""
        n_objects = self.oracle.n_objects
        n_clusters = len(medoids)
        first = self.assignment.distance_first

        costs = torch.full((n_clusters, n_objects), float('inf'),
                           dtype=first.dtype, device=first.device)

        medoid_set = set(medoids)
        if len(medoid_set) == n_objects:
            return costs[:, :0]

        for candidate in range(n_objects):
            if candidate in medoid_set:
                continue
            costs[:, candidate] = self._candidate_costs(candidate, n_clusters)

        return costs

    def calculate_swap_cost(self, candidate: int, cluster: int) -> float:
        """Cost of replacing the medoid of cluster with candidate.

        Args:
            candidate: Non-medoid object index
            cluster: Position of the medoid to replace

        Returns:
            Change in total cost (negative means improvement)
        """
        assert 0 <= cluster < self.assignment.n_clusters
        return self._candidate_costs(candidate, self.assignment.n_clusters)[cluster].item()

    def _candidate_costs(self, candidate: int, n_clusters: int) -> Tensor:
        """(k,) swap costs of candidate against every cluster."""
        labels = self.assignment.labels
        first = self.assignment.distance_first
        second = self.assignment.distance_second

        candidate_distances = self.oracle.column(candidate)

        # Objects losing their medoid fall back to the candidate or their second medoid
        losing = torch.minimum(candidate_distances, second) - first
        # Other objects switch only if the candidate is closer
        keeping = torch.clamp(candidate_distances - first, max=0.0)

        losing[candidate] = 0.0
        keeping[candidate] = 0.0

        per_cluster = torch.zeros(n_clusters, dtype=first.dtype, device=first.device)
        per_cluster.index_add_(0, labels, losing - keeping)

        return keeping.sum() + per_cluster - first[candidate]
