"""
End-to-end analysis run: load, split, scale, fit the logistic and KNN models
and evaluate each of the four runs on the reserved test rows.

Outputs (when write_outputs is True):
- reports/results/final_metrics.csv with one row per run
- reports/results/evaluation_report.txt with the printed report
- reports/results/knn_k_sweep.csv with the k sweep table
- reports/results/train_idx.npy, test_idx.npy and split_summary.json
- reports/figs/<run>_confusion_matrix.png
"""

import os
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .config import (
    FIGS_DIR,
    K_GRID,
    K_VALUES,
    KNN_FEATURES,
    LOGISTIC_FEATURES,
    NUMERICAL,
    POSITIVE_LABEL,
    RESULTS_DIR,
    SEED,
    STEPWISE_CRITERION,
    TARGET,
    THRESHOLD,
    TRAIN_FRACTION,
    TUNING_METRIC,
)
from .evaluate import ConfusionMatrix, evaluate, format_report, plot_confusion
from .knn import KNNModel, default_k, sweep_k
from .load_data import load_data
from .logistic import LogisticModel
from .prepare_inputs import save_split_indices, split_dataset
from .preprocess import StandardScaling
from .utils import ensure_dir, get_logger, save_text

logger = get_logger(__name__)


def _run_row(name: str, cm: ConfusionMatrix, n_test: int, **extra) -> Dict[str, Any]:
    return {"run": name, "n_test": n_test, **cm.counts(), **cm.metrics(), **extra}


def run_workflow(
    data,
    train_fraction: float = TRAIN_FRACTION,
    seed: int = SEED,
    k_values: Sequence[int] = K_VALUES,
    k_grid: Sequence[int] = K_GRID,
    threshold: float = THRESHOLD,
    criterion: str = STEPWISE_CRITERION,
    positive=POSITIVE_LABEL,
    write_outputs: bool = True,
    results_dir: str = RESULTS_DIR,
    figs_dir: str = FIGS_DIR,
) -> Dict[str, Any]:
    """
    Run the four evaluations and return {"rows", "report", "matrices", ...}.

    `data` is a CSV path or an already loaded DataFrame. Any HeartRiskError
    aborts the run.
    """
    df = load_data(data) if isinstance(data, (str, os.PathLike)) else data.copy()
    split = split_dataset(df, train_fraction=train_fraction, seed=seed)
    train, test = split.train, split.test
    y_test = test[TARGET].to_numpy()

    matrices: Dict[str, ConfusionMatrix] = {}
    rows: List[Dict[str, Any]] = []

    baseline = LogisticModel(LOGISTIC_FEATURES, target=TARGET, threshold=threshold).fit(train)
    cm = evaluate(baseline.predict(test), y_test, positive=positive)
    matrices["logistic_baseline"] = cm
    rows.append(_run_row("logistic_baseline", cm, len(test), features=" ".join(baseline.features)))

    tuned = baseline.stepwise(train, criterion=criterion)
    cm = evaluate(tuned.predict(test), y_test, positive=positive)
    matrices["logistic_tuned"] = cm
    rows.append(_run_row("logistic_tuned", cm, len(test), features=" ".join(tuned.features)))

    scaler = StandardScaling(NUMERICAL).fit(train)
    X_train = scaler.transform(train)[KNN_FEATURES].to_numpy()
    X_test = scaler.transform(test)[KNN_FEATURES].to_numpy()
    y_train = train[TARGET].to_numpy()

    logger.info("sqrt heuristic suggests k=%d for %d training rows", default_k(len(train)), len(train))
    for k in k_values:
        knn = KNNModel(k).fit(X_train, y_train)
        cm = evaluate(knn.predict(X_test), y_test, positive=positive)
        name = f"knn_k{k}"
        matrices[name] = cm
        rows.append(_run_row(name, cm, len(test), features=" ".join(KNN_FEATURES), k=int(k)))

    sweep = sweep_k(X_train, y_train, X_test, y_test, k_values=k_grid, metric=TUNING_METRIC, positive=positive)

    report = "\n\n".join(format_report(name, cm) for name, cm in matrices.items())
    report += f"\n\nBest k by {sweep['metric']} over {list(k_grid)}: {sweep['best_k']}"

    out: Dict[str, Any] = {
        "rows": rows,
        "report": report,
        "matrices": matrices,
        "split": split,
        "scaler": scaler,
        "models": {"logistic_baseline": baseline, "logistic_tuned": tuned},
        "sweep": sweep,
        "paths": {},
    }
    if write_outputs:
        out["paths"] = save_outputs(rows, report, matrices, sweep["table"], results_dir, figs_dir)
        out["paths"].update(save_split_indices(results_dir, split))
    return out


def save_outputs(rows: List[Dict[str, Any]], report: str, matrices: Dict[str, ConfusionMatrix],
                 sweep_table: pd.DataFrame, results_dir: str, figs_dir: Optional[str]) -> Dict[str, str]:
    ensure_dir(results_dir)
    paths = {
        "final_metrics": os.path.join(results_dir, "final_metrics.csv"),
        "report": os.path.join(results_dir, "evaluation_report.txt"),
        "k_sweep": os.path.join(results_dir, "knn_k_sweep.csv"),
    }
    pd.DataFrame(rows).to_csv(paths["final_metrics"], index=False)
    save_text(paths["report"], report + "\n")
    sweep_table.to_csv(paths["k_sweep"], index=False)

    if figs_dir:
        for name, cm in matrices.items():
            paths[f"{name}_png"] = plot_confusion(
                cm, os.path.join(figs_dir, f"{name}_confusion_matrix.png"), f"{name} confusion matrix"
            )
    logger.info("Saved final metrics to %s", paths["final_metrics"])
    return paths
