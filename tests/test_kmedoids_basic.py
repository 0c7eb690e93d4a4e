# tests/test_kmedoids_basic.py
"""
KMedoids end to end on small hand-checked inputs:
- process() fills a caller-provided result in place
- points and distance-matrix inputs
- sklearn-style surface: fit / predict / cluster_centers_ / params
- status reporting and the non-convergence warning
"""

from __future__ import annotations

import warnings

import numpy as np
import pytest
import torch

from pamcluster import (
    KMedoids,
    ClusteringResult,
    ConvergenceWarning,
    DataType,
    ProcessingState,
    ManhattanDistance,
)
from pamcluster.distances import PointDistanceOracle


def test_four_points_from_good_medoids(four_points):
    model = KMedoids(initial_medoids=[0, 2], tolerance=0.001, device="cpu")
    result = model.process(four_points)

    assert result.clusters == [[0, 1], [2, 3]]
    assert result.medoids == [0, 2]
    assert result.labels.tolist() == [0, 0, 1, 1]
    assert result.total_cost == pytest.approx(2.0)
    assert result.status is ProcessingState.CONVERGED
    assert result.converged
    assert result.n_iter == 1
    assert result.cost_history == pytest.approx([2.0, 2.0])


def test_four_points_from_bad_medoids(four_points):
    result = KMedoids(initial_medoids=[0, 1], device="cpu").process(four_points)
    assert result.medoids == [2, 1]
    assert sorted(map(sorted, result.clusters)) == [[0, 1], [2, 3]]
    assert result.total_cost == pytest.approx(2.0)
    assert result.cost_history[0] == pytest.approx(381.0)
    assert result.converged


def test_result_filled_in_place(four_points):
    result = ClusteringResult()
    returned = KMedoids(initial_medoids=[0, 2], device="cpu").process(four_points, result=result)
    assert returned is result
    assert result.get_clusters() == [[0, 1], [2, 3]]
    assert result.get_medoids() == [0, 2]
    assert result.get_total_cost() == pytest.approx(2.0)
    assert result.n_clusters == 2


def test_caller_medoids_not_modified(four_points):
    initial = [0, 1]
    KMedoids(initial_medoids=initial, device="cpu").process(four_points)
    assert initial == [0, 1]


def test_distance_matrix_input(four_points):
    D = PointDistanceOracle(four_points).to_matrix()
    model = KMedoids(initial_medoids=[0, 2], data_type="distance_matrix", device="cpu")
    result = model.process(D)
    assert result.clusters == [[0, 1], [2, 3]]
    assert result.total_cost == pytest.approx(2.0)

    # Override per call
    model = KMedoids(initial_medoids=[0, 2], device="cpu")
    assert model.process(D, data_type=DataType.DISTANCE_MATRIX).clusters == [[0, 1], [2, 3]]


def test_accepts_numpy_and_lists(four_points):
    as_list = four_points.tolist()
    as_numpy = four_points.numpy().astype(np.float32)
    for data in (as_list, as_numpy):
        result = KMedoids(initial_medoids=[0, 2], device="cpu").process(data)
        assert result.clusters == [[0, 1], [2, 3]]


def test_custom_metric(four_points):
    result = KMedoids(initial_medoids=[0, 2], metric="manhattan", device="cpu").process(four_points)
    assert result.total_cost == pytest.approx(2.0)

    result = KMedoids(initial_medoids=[0, 2], metric=ManhattanDistance(), device="cpu").process(four_points)
    assert result.total_cost == pytest.approx(2.0)

    result = KMedoids(
        initial_medoids=[0, 2],
        metric=lambda a, b: float(torch.abs(a - b).max()),
        device="cpu",
    ).process(four_points)
    assert result.total_cost == pytest.approx(2.0)


def test_n_clusters_with_init_strategies():
    X = torch.tensor([[0.0], [0.1], [0.2], [5.0], [5.1], [5.2]], dtype=torch.float64)
    for init in ("random", "k-medoids++"):
        model = KMedoids(n_clusters=2, init=init, random_state=0, device="cpu")
        result = model.process(X)
        assert sorted(map(sorted, result.clusters)) == [[0, 1, 2], [3, 4, 5]]
        assert sorted(result.medoids) == [1, 4]


def test_unknown_init_rejected():
    with pytest.raises(ValueError, match="Unknown init"):
        KMedoids(n_clusters=2, init="farthest", device="cpu").process([[0.0], [1.0]])


def test_sklearn_surface(four_points):
    model = KMedoids(initial_medoids=[0, 2], device="cpu")
    assert model.fit(four_points) is model

    assert model.medoid_indices_ == [0, 2]
    assert model.labels_.tolist() == [0, 0, 1, 1]
    assert model.inertia_ == pytest.approx(2.0)
    assert model.n_iter_ == 1
    assert torch.equal(model.cluster_centers_, four_points[[0, 2]])

    new = torch.tensor([[0.2, 0.1], [10.5, 9.0]], dtype=torch.float64)
    assert model.predict(new).tolist() == [0, 1]
    assert model.score(new) < 0

    assert model.fit_predict(four_points).tolist() == [0, 0, 1, 1]


def test_predict_rejects_feature_mismatch(four_points):
    model = KMedoids(initial_medoids=[0, 2], device="cpu").fit(four_points)
    with pytest.raises(ValueError, match="features"):
        model.predict(torch.zeros(2, 3, dtype=torch.float64))


def test_unfitted_access_raises():
    model = KMedoids(initial_medoids=[0], device="cpu")
    with pytest.raises(RuntimeError):
        _ = model.labels_
    with pytest.raises(RuntimeError):
        model.predict([[0.0]])


def test_matrix_fit_has_no_centers(four_points):
    D = PointDistanceOracle(four_points).to_matrix()
    model = KMedoids(initial_medoids=[0, 2], data_type="distance_matrix", device="cpu").fit(D)
    with pytest.raises(RuntimeError, match="points data"):
        _ = model.cluster_centers_


def test_params_roundtrip():
    model = KMedoids(initial_medoids=[0, 1], tolerance=0.01, max_iter=7, device="cpu")
    params = model.get_params()
    assert params["tolerance"] == 0.01
    assert params["max_iter"] == 7
    assert params["n_clusters"] == 2

    model.set_params(max_iter=3)
    assert model.max_iter == 3
    model.tolerance = 0.5
    assert model.tol == 0.5
    with pytest.raises(ValueError):
        model.set_params(bogus=1)


def test_set_params_normalises_metric_and_data_type(four_points):
    model = KMedoids(initial_medoids=[0, 2], device="cpu")
    assert model.set_params(metric="manhattan") is model
    assert isinstance(model.metric, ManhattanDistance)
    assert model.process(four_points).total_cost == pytest.approx(2.0)

    D = PointDistanceOracle(four_points).to_matrix()
    model.set_params(data_type="distance_matrix")
    assert model.data_type is DataType.DISTANCE_MATRIX
    assert model.process(D).clusters == [[0, 1], [2, 3]]

    with pytest.raises(ValueError, match="Unknown metric"):
        model.set_params(metric="no-such-metric")


def test_set_params_new_initial_medoids_updates_count(four_points):
    model = KMedoids(initial_medoids=[0, 2], device="cpu")
    model.set_params(initial_medoids=[0, 1, 2])
    assert model.n_clusters == 3

    result = model.process(four_points)
    # Every remaining swap only moves a medoid within its pair
    assert result.medoids == [0, 1, 2]
    assert result.clusters == [[0], [1], [2, 3]]
    assert result.total_cost == pytest.approx(1.0)

    # An explicit count in the same call still has to match
    model.set_params(initial_medoids=[0, 1], n_clusters=3)
    with pytest.raises(ValueError, match="n_clusters"):
        model.process(four_points)


def test_device_resolution():
    assert KMedoids(initial_medoids=[0], device="cpu").device == torch.device("cpu")
    assert KMedoids(initial_medoids=[0], device=torch.device("cpu")).device.type == "cpu"
    expected = "cuda" if torch.cuda.is_available() else "cpu"
    assert KMedoids(initial_medoids=[0]).device.type == expected
    assert KMedoids(initial_medoids=[0], device="auto").device.type == expected

    model = KMedoids(initial_medoids=[0]).set_params(device="cpu")
    assert model.device == torch.device("cpu")


@pytest.mark.skipif(torch.cuda.is_available(), reason="needs a machine without CUDA")
def test_cuda_request_falls_back_to_cpu():
    with pytest.warns(UserWarning, match="CUDA not available"):
        model = KMedoids(initial_medoids=[0], device="cuda")
    assert model.device == torch.device("cpu")


def test_model_is_reusable(four_points):
    model = KMedoids(initial_medoids=[0, 2], device="cpu")
    first = model.process(four_points)
    second = model.process(four_points)
    assert first.clusters == second.clusters
    assert first.total_cost == second.total_cost
    assert first is not second


def test_zero_budget_returns_initial_assignment(four_points):
    result = KMedoids(initial_medoids=[0, 1], max_iter=0, device="cpu").process(four_points)
    assert result.status is ProcessingState.MAX_ITER_REACHED
    assert result.n_iter == 0
    assert result.medoids == [0, 1]
    assert result.total_cost == pytest.approx(381.0)
    assert result.cost_history == pytest.approx([381.0])


def test_budget_exhaustion_warns_when_verbose(capsys):
    X = torch.arange(12, dtype=torch.float64).reshape(-1, 1) ** 2
    model = KMedoids(initial_medoids=[0, 1, 2], max_iter=1, tolerance=0.0,
                     verbose=1, device="cpu")
    with pytest.warns(ConvergenceWarning):
        result = model.process(X)
    assert result.status is ProcessingState.MAX_ITER_REACHED
    assert result.n_iter == 1
    assert "Processing 12 objects" in capsys.readouterr().out


def test_budget_exhaustion_silent_by_default():
    X = torch.arange(12, dtype=torch.float64).reshape(-1, 1) ** 2
    model = KMedoids(initial_medoids=[0, 1, 2], max_iter=1, tolerance=0.0, device="cpu")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = model.process(X)
    assert result.status is ProcessingState.MAX_ITER_REACHED


def test_history_records_swaps(four_points):
    model = KMedoids(initial_medoids=[0, 1], device="cpu")
    model.process(four_points)
    first = model.history_[0]
    assert first.swap_applied
    assert first.swap == (0, 2)
    assert first.swap_cost == pytest.approx(-379.0)
    assert model.history_[-1].converged


def test_repr_mentions_parameters():
    text = repr(KMedoids(initial_medoids=[0, 1], device="cpu"))
    assert "KMedoids" in text and "n_clusters=2" in text
