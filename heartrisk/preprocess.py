from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import NUMERICAL
from .exceptions import DegenerateColumnError
from .utils import get_logger

logger = get_logger(__name__)

# spreads below this, relative to the column magnitude, are rounding noise
ZERO_SPREAD = 1e-12


class StandardScaling:
    """Z-score scaling whose mean/std come from the training rows only."""

    def __init__(self, columns: Sequence[str] = NUMERICAL) -> None:
        self.columns: List[str] = list(columns)
        self.means: Dict[str, float] = {}
        self.scales: Dict[str, float] = {}
        self.n_rows: Optional[int] = None

    @property
    def fitted(self) -> bool:
        return self.n_rows is not None

    def fit(self, train: pd.DataFrame) -> "StandardScaling":
        means = {}
        scales = {}
        n = len(train)
        for c in self.columns:
            s = train[c].astype(float)
            mean = float(s.mean(skipna=True))
            std = float(s.std(skipna=True)) if s.notna().sum() > 1 else float("nan")
            if not np.isfinite(std) or std <= ZERO_SPREAD * max(abs(mean), 1.0):
                raise DegenerateColumnError(c, n)
            means[c] = mean
            scales[c] = std
        self.means = means
        self.scales = scales
        self.n_rows = n
        logger.info("Fitted scaling on %d rows for columns %s", n, self.columns)
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        if not self.fitted:
            raise RuntimeError("StandardScaling is not fitted. Call fit() first.")
        out = df.copy()
        for c in self.columns:
            out[c] = (df[c].astype(float) - self.means[c]) / self.scales[c]
        return out

    def fit_transform(self, train: pd.DataFrame) -> pd.DataFrame:
        return self.fit(train).transform(train)

    def params(self) -> pd.DataFrame:
        return pd.DataFrame({"mean": self.means, "std": self.scales}).loc[self.columns]
