"""
Confusion matrix and derived metrics for binary predictions.

A metric whose denominator is zero is undefined: the property raises
UndefinedMetricError, while metrics() reports it as NaN so a report can still
be printed.
"""

import os
from dataclasses import dataclass
from typing import Dict

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from sklearn.metrics import confusion_matrix

from .config import POSITIVE_LABEL
from .exceptions import InvalidParameterError, UndefinedMetricError
from .utils import ensure_dir, get_logger

sns.set(style="whitegrid", context="talk")

logger = get_logger(__name__)

METRIC_NAMES = ("accuracy", "recall", "specificity", "precision")


def _ratio(name: str, num: int, den: int) -> float:
    if den == 0:
        raise UndefinedMetricError(f"{name} is undefined: denominator is zero")
    return num / den


@dataclass(frozen=True)
class ConfusionMatrix:
    tp: int
    tn: int
    fp: int
    fn: int

    @property
    def total(self) -> int:
        return self.tp + self.tn + self.fp + self.fn

    @property
    def accuracy(self) -> float:
        return _ratio("accuracy", self.tp + self.tn, self.total)

    @property
    def recall(self) -> float:
        return _ratio("recall", self.tp, self.tp + self.fn)

    sensitivity = recall

    @property
    def specificity(self) -> float:
        return _ratio("specificity", self.tn, self.tn + self.fp)

    @property
    def precision(self) -> float:
        return _ratio("precision", self.tp, self.tp + self.fp)

    def counts(self) -> Dict[str, int]:
        return {"tp": self.tp, "tn": self.tn, "fp": self.fp, "fn": self.fn}

    def metrics(self) -> Dict[str, float]:
        out = {}
        for name in METRIC_NAMES:
            try:
                out[name] = float(getattr(self, name))
            except UndefinedMetricError as e:
                logger.warning("%s (counts %s)", e, self.counts())
                out[name] = float("nan")
        return out

    def as_frame(self) -> pd.DataFrame:
        """2x2 table with predicted labels as rows and actual labels as columns."""
        return pd.DataFrame(
            [[self.tn, self.fn], [self.fp, self.tp]],
            index=pd.Index(["0", "1"], name="Predicted"),
            columns=pd.Index(["0", "1"], name="Actual"),
        )


def evaluate(predicted, actual, positive=POSITIVE_LABEL) -> ConfusionMatrix:
    """Count (predicted, actual) pairs with `positive` as the positive class."""
    y_pred = np.asarray(predicted)
    y_true = np.asarray(actual)
    if len(y_pred) != len(y_true):
        raise InvalidParameterError(
            f"predicted and actual must have equal length, got {len(y_pred)} and {len(y_true)}"
        )
    if len(y_true) == 0:
        return ConfusionMatrix(tp=0, tn=0, fp=0, fn=0)
    pos = y_true == positive
    pred_pos = y_pred == positive
    cm = confusion_matrix(pos, pred_pos, labels=[False, True])
    tn, fp, fn, tp = (int(v) for v in cm.ravel())
    return ConfusionMatrix(tp=tp, tn=tn, fp=fp, fn=fn)


def _fmt(value: float) -> str:
    return "undefined" if np.isnan(value) else f"{value:.4f}"


def format_report(name: str, cm: ConfusionMatrix) -> str:
    lines = [f"=== {name} ===", cm.as_frame().to_string(), ""]
    for metric, value in cm.metrics().items():
        lines.append(f"{metric:<12}{_fmt(value)}")
    return "\n".join(lines)


def plot_confusion(cm: ConfusionMatrix, outpath: str, title: str) -> str:
    ensure_dir(os.path.dirname(outpath) or ".")
    plt.figure(figsize=(5, 4))
    sns.heatmap(cm.as_frame(), annot=True, fmt="d", cmap="Blues")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(outpath, dpi=150)
    plt.close()
    return outpath
