import math

import numpy as np
import pytest

from heartrisk.evaluate import ConfusionMatrix, evaluate, format_report, plot_confusion
from heartrisk.exceptions import InvalidParameterError, UndefinedMetricError


def test_counts_and_metrics():
    cm = evaluate([1, 1, 0, 0, 1, 0], [1, 0, 0, 1, 1, 0])
    assert cm.counts() == {"tp": 2, "tn": 2, "fp": 1, "fn": 1}
    assert cm.total == 6
    assert cm.accuracy == pytest.approx(4 / 6)
    assert cm.recall == pytest.approx(2 / 3)
    assert cm.sensitivity == cm.recall
    assert cm.specificity == pytest.approx(2 / 3)
    assert cm.precision == pytest.approx(2 / 3)


def test_perfect_prediction():
    actual = np.array([0, 1, 1, 0, 1])
    cm = evaluate(actual, actual)
    assert cm.accuracy == 1.0
    assert cm.fp == 0 and cm.fn == 0


def test_positive_label_can_be_switched():
    cm = evaluate([1, 1, 0], [1, 0, 0], positive=0)
    assert cm.counts() == {"tp": 1, "tn": 1, "fp": 0, "fn": 1}


def test_no_positive_predictions_leaves_precision_undefined():
    cm = evaluate([0, 0, 0], [1, 0, 0])
    with pytest.raises(UndefinedMetricError):
        cm.precision
    metrics = cm.metrics()
    assert math.isnan(metrics["precision"])
    assert metrics["accuracy"] == pytest.approx(2 / 3)
    assert "undefined" in format_report("all negative", cm)


def test_undefined_metric_is_zero_division():
    with pytest.raises(ZeroDivisionError):
        ConfusionMatrix(tp=0, tn=0, fp=0, fn=0).accuracy


def test_length_mismatch():
    with pytest.raises(InvalidParameterError):
        evaluate([0, 1], [0, 1, 1])


def test_plot_confusion(tmp_path):
    cm = ConfusionMatrix(tp=3, tn=4, fp=1, fn=2)
    out = plot_confusion(cm, str(tmp_path / "figs" / "cm.png"), "test")
    assert (tmp_path / "figs" / "cm.png").exists()
    assert out.endswith("cm.png")
    frame = cm.as_frame()
    assert int(frame.values.sum()) == cm.total
    assert frame.loc["1", "1"] == 3
