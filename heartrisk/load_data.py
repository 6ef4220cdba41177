import os
from typing import List, Sequence

import pandas as pd

from .config import CATEGORICAL, REQUIRED_COLUMNS, TARGET
from .exceptions import MissingFileError, SchemaError
from .utils import get_logger

logger = get_logger(__name__)


def check_schema(df: pd.DataFrame, required: Sequence[str] = REQUIRED_COLUMNS) -> List[str]:
    """Return the required columns absent from df (empty list when the schema holds)."""
    return [c for c in required if c not in df.columns]


def load_data(csv_path, required: Sequence[str] = REQUIRED_COLUMNS,
              categorical: Sequence[str] = CATEGORICAL, target: str = TARGET) -> pd.DataFrame:
    """
    Read the patient table, validate its header and coerce categorical columns.

    Rows with missing values in required columns are dropped. The target must
    be binary 0/1 and is stored as a category like the other factors.
    """
    if not os.path.isfile(csv_path):
        raise MissingFileError(f"CSV not found at: {csv_path}")

    try:
        df = pd.read_csv(csv_path)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise MissingFileError(f"CSV at {csv_path} could not be read: {e}") from e

    missing = check_schema(df, required)
    if missing:
        raise SchemaError(f"Missing expected columns {missing} in {csv_path} (found {list(df.columns)})")

    n_before = len(df)
    df = df.dropna(subset=list(required)).reset_index(drop=True)
    if len(df) < n_before:
        logger.warning("Dropped %d of %d rows with missing values in required columns", n_before - len(df), n_before)

    if target in df.columns:
        bad = sorted(set(df[target].unique()) - {0, 1})
        if bad:
            raise SchemaError(f"Column '{target}' must be binary 0/1; found values {bad} in {len(df)} rows")
        df[target] = df[target].astype(int)

    for col in list(categorical) + ([target] if target in df.columns else []):
        if col in df.columns:
            df[col] = df[col].astype("category")

    logger.info("Loaded %d rows x %d columns from %s", df.shape[0], df.shape[1], csv_path)
    return df.copy()
