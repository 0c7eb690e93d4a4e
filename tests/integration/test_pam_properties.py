"""
Whole-run properties of PAM on random data:
determinism, cost monotonicity, termination, partition validity,
points/matrix equivalence and degenerate inputs.
"""

import numpy as np
import pytest
import torch

from utils import brute_force_cost, labels_equal_up_to_perm
from data_gen import make_blobs, make_line

from pamcluster import KMedoids, ProcessingState
from pamcluster.assignments import NearestMedoidAssignment
from pamcluster.distances import PointDistanceOracle
from pamcluster.updates import PAMSwapUpdater


def _random_points(seed: int, n: int = 40, d: int = 2) -> torch.Tensor:
    rng = np.random.default_rng(seed)
    return torch.from_numpy(rng.normal(size=(n, d)))


def _check_partition(result, n: int) -> None:
    """Clusters partition range(n), each led by its medoid."""
    assert len(result.clusters) == len(result.medoids)
    assert len(set(result.medoids)) == len(result.medoids)
    members = []
    for position, cluster in enumerate(result.clusters):
        assert cluster[0] == result.medoids[position]
        assert result.labels[cluster].tolist() == [position] * len(cluster)
        members.extend(cluster)
    assert sorted(members) == list(range(n))


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_deterministic_for_fixed_inputs(seed):
    X = _random_points(seed)
    a = KMedoids(n_clusters=4, random_state=seed, device="cpu").process(X)
    b = KMedoids(n_clusters=4, random_state=seed, device="cpu").process(X)

    assert a.medoids == b.medoids
    assert a.clusters == b.clusters
    assert torch.equal(a.labels, b.labels)
    assert a.total_cost == b.total_cost
    assert a.cost_history == b.cost_history


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_cost_never_increases(seed):
    X = _random_points(seed, n=60)
    model = KMedoids(initial_medoids=[0, 1, 2, 3, 4], tolerance=0.0, device="cpu")
    result = model.process(X)

    history = result.cost_history
    assert len(history) == result.n_iter + 1
    for state, before, after in zip(model.history_, history[:-1], history[1:]):
        if state.swap_applied:
            assert after < before
            assert after == pytest.approx(before + state.swap_cost)
        else:
            assert after == pytest.approx(before)


@pytest.mark.parametrize("max_iter", [1, 2, 5, 100])
def test_terminates_within_budget(max_iter):
    X = _random_points(7, n=50)
    result = KMedoids(initial_medoids=list(range(6)), max_iter=max_iter,
                      tolerance=0.0, device="cpu").process(X)
    assert result.n_iter <= max_iter
    assert result.status.is_terminal
    if result.status is ProcessingState.MAX_ITER_REACHED:
        assert result.n_iter == max_iter


@pytest.mark.parametrize("k", [1, 3, 8])
def test_result_is_valid_partition(k):
    X = _random_points(11, n=30)
    result = KMedoids(n_clusters=k, init="k-medoids++", random_state=0, device="cpu").process(X)
    _check_partition(result, 30)
    D = PointDistanceOracle(X).to_matrix()
    assert result.total_cost == pytest.approx(brute_force_cost(D, result.medoids))


@pytest.mark.parametrize("seed", [0, 5])
def test_points_and_matrix_runs_match(seed):
    X = _random_points(seed, n=35, d=3)
    D = PointDistanceOracle(X).to_matrix()
    medoids = [0, 10, 20, 30]

    from_points = KMedoids(initial_medoids=medoids, device="cpu").process(X)
    from_matrix = KMedoids(initial_medoids=medoids, device="cpu").process(D, data_type="distance_matrix")

    assert from_points.medoids == from_matrix.medoids
    assert from_points.clusters == from_matrix.clusters
    assert torch.equal(from_points.labels, from_matrix.labels)
    assert from_points.total_cost == from_matrix.total_cost
    assert from_points.n_iter == from_matrix.n_iter


def test_converged_result_is_swap_local_optimum():
    X = _random_points(3, n=40)
    result = KMedoids(initial_medoids=[0, 1, 2], tolerance=0.0, device="cpu").process(X)
    assert result.converged

    oracle = PointDistanceOracle(X)
    assignment = NearestMedoidAssignment(oracle)
    assignment.update_clusters(result.medoids)
    grid = PAMSwapUpdater(oracle, assignment).swap_cost_grid(result.medoids)
    assert grid.min().item() >= 0.0


def test_every_object_a_medoid():
    X = make_line(6)
    result = KMedoids(initial_medoids=list(range(6)), device="cpu").process(X)
    assert result.total_cost == 0.0
    assert result.clusters == [[i] for i in range(6)]
    assert result.status is ProcessingState.CONVERGED
    assert result.n_iter == 1


def test_single_cluster_finds_best_medoid():
    X = _random_points(9, n=25)
    D = PointDistanceOracle(X).to_matrix()
    best = int(torch.argmin(D.sum(dim=0)))
    start = 0 if best != 0 else 1

    result = KMedoids(initial_medoids=[start], device="cpu").process(X)
    assert result.medoids == [best]
    assert result.clusters[0] == [best] + [i for i in range(25) if i != best]
    assert result.total_cost == pytest.approx(D[:, best].sum().item())


def test_all_zero_distances():
    D = torch.zeros(5, 5, dtype=torch.float64)
    result = KMedoids(initial_medoids=[0, 1], device="cpu").process(D, data_type="distance_matrix")
    assert result.medoids == [0, 1]
    assert result.total_cost == 0.0
    assert result.converged
    assert result.n_iter == 1


def test_swap_order_of_initial_medoids_only_relabels():
    X, _ = make_blobs(n_per=15, seed=4)
    a = KMedoids(initial_medoids=[0, 15, 30], tolerance=0.0, device="cpu").process(X)
    b = KMedoids(initial_medoids=[30, 15, 0], tolerance=0.0, device="cpu").process(X)
    assert a.total_cost == pytest.approx(b.total_cost)
    assert labels_equal_up_to_perm(a.labels, b.labels)
