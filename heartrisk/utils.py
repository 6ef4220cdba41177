import io
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

import pandas as pd


def ensure_dir(path):
    os.makedirs(path, exist_ok=True)


def save_text(path, text):
    ensure_dir(os.path.dirname(path) or ".")
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """Configure the package logger with a stdout handler and an optional rotating file."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    fmt = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
    date_fmt = "%Y-%m-%d %H:%M:%S"

    root = logging.getLogger("heartrisk")
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=date_fmt))
    root.addHandler(handler)

    if log_dir and log_file:
        ensure_dir(log_dir)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, log_file),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(fmt, datefmt=date_fmt))
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    if name.startswith("heartrisk"):
        return logging.getLogger(name)
    return logging.getLogger(f"heartrisk.{name}")


def save_initial_audit(df: pd.DataFrame, outdir: str, target_col: str = "target") -> dict:
    """Write head, dtypes, describe() and class balance text files; return their paths."""
    ensure_dir(outdir)
    paths = {}

    paths["head"] = os.path.join(outdir, "head.txt")
    save_text(paths["head"], df.head(10).to_csv(index=False))

    buf = io.StringIO()
    df.info(buf=buf)
    paths["info"] = os.path.join(outdir, "info.txt")
    save_text(paths["info"], buf.getvalue())

    paths["describe"] = os.path.join(outdir, "describe.txt")
    save_text(paths["describe"], df.describe(include="all").to_string())

    paths["class_distribution"] = os.path.join(outdir, "class_distribution.txt")
    if target_col in df.columns:
        counts = df[target_col].value_counts(dropna=False).sort_index()
        percents = df[target_col].value_counts(normalize=True, dropna=False).sort_index() * 100
        lines = ["Value\tCount\tPercent"]
        for val in counts.index:
            lines.append(f"{val}\t{counts.loc[val]}\t{percents.loc[val]:.2f}%")
        save_text(paths["class_distribution"], "\n".join(lines))
    else:
        save_text(
            paths["class_distribution"],
            f"Target column '{target_col}' not found in DataFrame columns: {list(df.columns)}",
        )
    return paths
