import json
import os
from dataclasses import dataclass
from typing import Dict

import numpy as np
import pandas as pd

from .config import SEED, TARGET, TRAIN_FRACTION
from .exceptions import InvalidParameterError
from .utils import ensure_dir, get_logger

logger = get_logger(__name__)


@dataclass
class Split:
    train: pd.DataFrame
    test: pd.DataFrame
    train_idx: np.ndarray
    test_idx: np.ndarray


def _check_fraction(train_fraction: float, n: int) -> int:
    if not 0.0 < train_fraction < 1.0:
        raise InvalidParameterError(f"train_fraction must lie strictly between 0 and 1, got {train_fraction}")
    n_train = int(np.round(n * train_fraction))
    if n_train == 0 or n_train == n:
        raise InvalidParameterError(
            f"train_fraction={train_fraction} on {n} rows leaves an empty side (n_train={n_train})"
        )
    return n_train


def _random_indices(n: int, n_train: int, rng: np.random.RandomState):
    indices = np.arange(n)
    rng.shuffle(indices)
    return indices[:n_train], indices[n_train:]


def _stratified_indices(labels: np.ndarray, train_fraction: float, rng: np.random.RandomState):
    train_parts = []
    test_parts = []
    for label in sorted(np.unique(labels)):
        idxs = np.where(labels == label)[0]
        rng.shuffle(idxs)
        n_train = int(np.round(len(idxs) * train_fraction))
        train_parts.append(idxs[:n_train])
        test_parts.append(idxs[n_train:])

    train_idx = np.concatenate(train_parts)
    test_idx = np.concatenate(test_parts)
    rng.shuffle(train_idx)
    rng.shuffle(test_idx)
    return train_idx, test_idx


def split_dataset(
    df: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    seed: int = SEED,
    stratify: bool = False,
    target: str = TARGET,
) -> Split:
    """
    Partition rows into disjoint train/test frames.

    The train side holds round(train_fraction * n) rows. The same seed on the
    same frame always yields the same partition. With stratify=True the rounding
    is applied per target class.
    """
    n = len(df)
    n_train = _check_fraction(train_fraction, n)
    rng = np.random.RandomState(seed)

    if stratify:
        train_idx, test_idx = _stratified_indices(np.asarray(df[target]), train_fraction, rng)
    else:
        train_idx, test_idx = _random_indices(n, n_train, rng)

    train = df.iloc[train_idx].reset_index(drop=True)
    test = df.iloc[test_idx].reset_index(drop=True)
    logger.info("Split %d rows into %d train / %d test (seed=%d, stratify=%s)", n, len(train), len(test), seed, stratify)
    return Split(train=train, test=test, train_idx=train_idx, test_idx=test_idx)


def save_split_indices(outdir: str, split: Split) -> Dict[str, str]:
    ensure_dir(outdir)
    train_path = os.path.join(outdir, "train_idx.npy")
    test_path = os.path.join(outdir, "test_idx.npy")
    np.save(train_path, split.train_idx)
    np.save(test_path, split.test_idx)
    summary_path = os.path.join(outdir, "split_summary.json")
    with open(summary_path, "w", encoding="utf-8") as f:
        json.dump({
            "n_train": int(len(split.train_idx)),
            "n_test": int(len(split.test_idx)),
            "train_idx_path": "train_idx.npy",
            "test_idx_path": "test_idx.npy"
        }, f, indent=2)
    return {"train_idx": train_path, "test_idx": test_path, "summary": summary_path}
