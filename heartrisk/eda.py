import os
from typing import Dict, List, Sequence

import matplotlib.pyplot as plt
import seaborn as sns
import pandas as pd
import scipy.stats as stats

from .config import CATEGORICAL, NUMERICAL, TARGET
from .utils import ensure_dir, get_logger

sns.set(style="whitegrid", context="talk")

logger = get_logger(__name__)


def _save_fig(fig, filepath: str):
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def describe_by_target(df: pd.DataFrame, cols: Sequence[str] = NUMERICAL, target: str = TARGET) -> pd.DataFrame:
    """Mean, std, min, median and max of each numeric column split by target class."""
    grouped = df.groupby(target, observed=True)[list(cols)]
    return grouped.agg(["mean", "std", "min", "median", "max"]).T


def category_proportions(df: pd.DataFrame, cols: Sequence[str] = CATEGORICAL, target: str = TARGET) -> Dict[str, pd.DataFrame]:
    """Row-normalised crosstab of each categorical column against the target."""
    return {c: pd.crosstab(df[c], df[target], normalize="index") for c in cols}


def plot_histograms(df: pd.DataFrame, cols: Sequence[str], outdir: str, hue: str = TARGET) -> List[str]:
    ensure_dir(outdir)
    saved = []
    for col in cols:
        fig, ax = plt.subplots(figsize=(6, 4))
        sns.histplot(data=df, x=col, hue=hue if hue in df.columns else None, kde=True, ax=ax)
        ax.set_title(f"Histogram of {col}")
        ax.set_ylabel("Count")
        saved.append(_save_fig(fig, os.path.join(outdir, f"hist_{col}.png")))
    return saved


def plot_boxplots(df: pd.DataFrame, cols: Sequence[str], outdir: str, by: str = TARGET) -> List[str]:
    ensure_dir(outdir)
    saved = []
    for col in cols:
        fig, ax = plt.subplots(figsize=(6, 4))
        sns.boxplot(data=df, x=by, y=col, ax=ax)
        ax.set_title(f"{col} by {by}")
        saved.append(_save_fig(fig, os.path.join(outdir, f"box_{col}.png")))
    return saved


def plot_qq(df: pd.DataFrame, col: str, outdir: str) -> str:
    ensure_dir(outdir)
    fig = plt.figure(figsize=(6, 6))
    ax = fig.add_subplot(111)
    stats.probplot(df[col].dropna().astype(float), dist="norm", plot=ax)
    ax.set_title(f"Q-Q plot of {col}")
    return _save_fig(fig, os.path.join(outdir, f"qq_{col}.png"))


def plot_corr_heatmap(df: pd.DataFrame, cols: Sequence[str], outdir: str) -> str:
    ensure_dir(outdir)
    corr = df[list(cols)].astype(float).corr()
    fig, ax = plt.subplots(figsize=(8, 6))
    sns.heatmap(corr, annot=True, fmt=".2f", cmap="vlag", center=0, ax=ax)
    ax.set_title("Correlation heatmap")
    return _save_fig(fig, os.path.join(outdir, "corr_heatmap.png"))


def plot_countplots(df: pd.DataFrame, cols: Sequence[str], outdir: str, hue: str = TARGET) -> List[str]:
    ensure_dir(outdir)
    saved = []
    for col in cols:
        fig, ax = plt.subplots(figsize=(6, 4))
        # the target's own plot is coloured by itself, without a legend
        split_by = hue if hue in df.columns and hue != col else col
        sns.countplot(data=df, x=col, hue=split_by, palette="muted", legend=split_by != col, ax=ax)
        ax.set_title(f"Countplot of {col}")
        ax.set_ylabel("Count")
        saved.append(_save_fig(fig, os.path.join(outdir, f"count_{col}.png")))
    return saved


def run_eda(df: pd.DataFrame, outdir: str, numerical: Sequence[str] = NUMERICAL,
            categorical: Sequence[str] = CATEGORICAL, target: str = TARGET) -> Dict[str, object]:
    """Produce every descriptive figure for the patient table and return their paths."""
    paths = {
        "histograms": plot_histograms(df, numerical, outdir, hue=target),
        "boxplots": plot_boxplots(df, numerical, outdir, by=target),
        "qq": [plot_qq(df, col, outdir) for col in ("chol", "oldpeak") if col in df.columns],
        "corr": plot_corr_heatmap(df, list(numerical) + [target], outdir),
        "counts": plot_countplots(df, list(categorical) + [target], outdir, hue=target),
    }
    logger.info("EDA figures saved to %s", outdir)
    return paths
