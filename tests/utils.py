# tests/utils.py
"""
Small, reusable helpers used across the pamcluster test suite.

Functions:
- labels_equal_up_to_perm(y1, y2): label vectors equal after renaming clusters.
- perm_invariant_accuracy(y_pred, y_true): best accuracy over cluster renamings.
- brute_force_cost(D, medoids): total cost of medoids computed from scratch.
- best_k_medoids(D, k): exhaustive optimum for tiny datasets.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import itertools
import time
from contextlib import contextmanager
from typing import Any, Dict, Sequence, Tuple

import numpy as np
import torch


def _to_numpy(x: Any) -> np.ndarray:
    if isinstance(x, torch.Tensor):
        x = x.detach().cpu().numpy()
    return np.asarray(x)


def labels_equal_up_to_perm(y1: Any, y2: Any) -> bool:
    """Return True if y2 can be relabelled to equal y1 exactly."""
    a = _to_numpy(y1)
    b = _to_numpy(y2)
    if a.shape != b.shape:
        return False
    mapping: Dict[int, int] = {}
    for u, v in zip(b.tolist(), a.tolist()):
        if mapping.setdefault(u, v) != v:
            return False
    return len(set(mapping.values())) == len(mapping)


def perm_invariant_accuracy(y_pred: Any, y_true: Any) -> float:
    """
    Best accuracy over all renamings of predicted clusters.

    Brute force over permutations; tests keep the number of clusters small.
    """
    y_pred = _to_numpy(y_pred)
    y_true = _to_numpy(y_true)
    pred_ids = sorted(set(y_pred.tolist()))
    true_ids = sorted(set(y_true.tolist()))
    if len(pred_ids) > len(true_ids):
        true_ids = true_ids + [-1] * (len(pred_ids) - len(true_ids))

    best = 0.0
    for perm in itertools.permutations(true_ids, len(pred_ids)):
        mapping = dict(zip(pred_ids, perm))
        mapped = np.array([mapping[v] for v in y_pred.tolist()])
        best = max(best, float(np.mean(mapped == y_true)))
    return best


def brute_force_cost(D: Any, medoids: Sequence[int]) -> float:
    """Sum over objects of the distance to the closest medoid."""
    D = _to_numpy(D)
    return float(D[:, list(medoids)].min(axis=1).sum())


def best_k_medoids(D: Any, k: int) -> Tuple[float, Tuple[int, ...]]:
    """Exhaustive search of the optimal medoid set (tiny inputs only)."""
    D = _to_numpy(D)
    n = D.shape[0]
    best_cost = np.inf
    best_set: Tuple[int, ...] = tuple()
    for combo in itertools.combinations(range(n), k):
        cost = brute_force_cost(D, combo)
        if cost < best_cost:
            best_cost = cost
            best_set = combo
    return float(best_cost), best_set


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("process", {"n": 400, "k": 3}):
    ...     model.process(X)

    Output
    ------
    [timing] process {"n":400,"k":3} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=repr)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
