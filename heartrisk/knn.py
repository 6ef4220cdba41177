import math
from typing import Any, Dict, List, Sequence

import numpy as np
import pandas as pd
from scipy.spatial.distance import cdist

from .config import K_GRID, POSITIVE_LABEL, TUNING_METRIC
from .evaluate import evaluate
from .exceptions import InvalidParameterError
from .utils import get_logger

logger = get_logger(__name__)

METRICS = {"euclidean": "euclidean", "manhattan": "cityblock"}


def default_k(n_train: int) -> int:
    """Odd integer nearest sqrt(n_train); the usual starting point for k."""
    if n_train < 1:
        raise InvalidParameterError(f"n_train must be positive, got {n_train}")
    root = math.sqrt(n_train)
    k = int(round(root))
    if k % 2 == 0:
        k = k + 1 if root > k else k - 1
    return max(1, k)


class KNNModel:
    """
    Lazy k-nearest-neighbours classifier.

    fit() only stores the (already scaled) training rows. Votes that tie on
    count go to the tied label whose neighbours are closer on average; a tie on
    that too goes to the lowest label value.
    """

    def __init__(self, k: int, metric: str = "euclidean") -> None:
        if not isinstance(k, (int, np.integer)) or isinstance(k, bool) or k < 1:
            raise InvalidParameterError(f"k must be a positive integer, got {k!r}")
        if metric not in METRICS:
            raise InvalidParameterError(f"Unknown distance metric '{metric}', expected one of {sorted(METRICS)}")
        self.k = int(k)
        self.metric = metric
        self.X_train = None
        self.y_train = None

    def fit(self, X, y) -> "KNNModel":
        X_arr = np.asarray(X, dtype=float)
        y_arr = np.asarray(y)
        if X_arr.ndim != 2 or len(X_arr) != len(y_arr):
            raise InvalidParameterError(f"X must be 2-D with one row per label, got shapes {X_arr.shape} and {y_arr.shape}")
        if self.k > len(X_arr):
            raise InvalidParameterError(f"k={self.k} exceeds the {len(X_arr)} training rows")

        n_classes = len(np.unique(y_arr))
        if n_classes == 2 and self.k % 2 == 0:
            logger.warning("k=%d is even for a two-class problem; ties fall back to mean neighbour distance", self.k)

        self.X_train = X_arr
        self.y_train = y_arr
        return self

    def kneighbors(self, X):
        """Return (distances, indices) of the k nearest training rows for each row of X."""
        if self.X_train is None:
            raise RuntimeError("KNNModel is not fitted. Call fit() first.")
        dists = cdist(np.asarray(X, dtype=float), self.X_train, metric=METRICS[self.metric])
        nn_idx = np.argsort(dists, axis=1, kind="stable")[:, :self.k]
        nn_dist = np.take_along_axis(dists, nn_idx, axis=1)
        return nn_dist, nn_idx

    def _vote(self, nn_labels: np.ndarray, nn_dist: np.ndarray):
        unique, counts = np.unique(nn_labels, return_counts=True)
        candidates = unique[counts == counts.max()]
        if len(candidates) == 1:
            return candidates[0]
        best_candidate = None
        best_avg = None
        for cand in candidates:
            avgd = nn_dist[nn_labels == cand].mean()
            if best_avg is None or avgd < best_avg:
                best_avg = avgd
                best_candidate = cand
        return best_candidate

    def predict(self, X) -> np.ndarray:
        nn_dist, nn_idx = self.kneighbors(X)
        preds = np.empty(len(nn_idx), dtype=self.y_train.dtype)
        for i in range(len(nn_idx)):
            preds[i] = self._vote(self.y_train[nn_idx[i]], nn_dist[i])
        return preds


def sweep_k(X_train, y_train, X_test, y_test, k_values: Sequence[int] = K_GRID,
            metric: str = TUNING_METRIC, positive=POSITIVE_LABEL) -> Dict[str, Any]:
    """
    Re-run the KNN evaluation for each k and pick the k that maximises metric.

    Undefined metric values rank last; equal scores go to the smaller k.
    """
    rows: List[Dict[str, Any]] = []
    for k in k_values:
        model = KNNModel(k).fit(X_train, y_train)
        cm = evaluate(model.predict(X_test), y_test, positive=positive)
        rows.append({"k": int(k), **cm.counts(), **cm.metrics()})

    table = pd.DataFrame(rows)
    if metric not in table.columns:
        raise InvalidParameterError(f"Unknown tuning metric '{metric}'")
    ranked = table.assign(_score=table[metric].fillna(-np.inf)).sort_values(["_score", "k"], ascending=[False, True])
    best_k = int(ranked.iloc[0]["k"])
    logger.info("k sweep over %s picked k=%d (%s=%.4f)", list(k_values), best_k, metric, ranked.iloc[0]["_score"])
    return {"table": table, "best_k": best_k, "metric": metric}
