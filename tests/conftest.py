# tests/conftest.py
# Ensure project root is importable as a module during pytest runs
import os
import pathlib
import sys

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pandas as pd
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from heartrisk.load_data import load_data


def make_heart_frame(n=300, seed=0):
    """Synthetic patient table with a noisy logistic link to the target."""
    rng = np.random.RandomState(seed)
    df = pd.DataFrame({
        "age": np.round(rng.normal(54, 9, n)).astype(int),
        "sex": rng.choice([0, 1], n, p=[0.3, 0.7]),
        "cp": rng.choice([0, 1, 2, 3], n, p=[0.45, 0.2, 0.25, 0.1]),
        "trestbps": np.round(rng.normal(131, 17, n)).astype(int),
        "chol": np.round(rng.normal(246, 50, n)).astype(int),
        "fbs": rng.choice([0, 1], n, p=[0.85, 0.15]),
        "thalach": np.round(rng.normal(150, 22, n)).astype(int),
        "exang": rng.choice([0, 1], n, p=[0.67, 0.33]),
        "oldpeak": np.round(rng.exponential(1.0, n), 1),
    })
    logit = (
        0.6
        - 0.03 * (df["age"] - 54)
        + 0.03 * (df["thalach"] - 150)
        - 0.7 * df["oldpeak"]
        - 0.9 * df["exang"]
        + 0.8 * (df["cp"] > 0)
        - 0.7 * df["sex"]
    )
    df["target"] = (rng.uniform(0, 1, n) < 1 / (1 + np.exp(-logit))).astype(int)
    return df


@pytest.fixture
def heart_csv(tmp_path):
    path = tmp_path / "heart.csv"
    make_heart_frame().to_csv(path, index=False)
    return path


@pytest.fixture
def heart_df(heart_csv):
    return load_data(heart_csv)
