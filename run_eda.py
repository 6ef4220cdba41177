"""
run_eda.py
Descriptive statistics and figures for the patient table.
Run from project root.

Produces:
- reports/audit/ (head, info, describe, class_distribution)
- reports/figs/ (histograms, boxplots, Q-Q plots, correlation heatmap, countplots)
- reports/eda_summary.txt (numeric summary by target class)
"""
import argparse
import os
import sys

from heartrisk.config import FIGS_DIR, LOG_LEVEL, RAW_CSV, REPORTS_DIR
from heartrisk.eda import category_proportions, describe_by_target, run_eda
from heartrisk.exceptions import HeartRiskError
from heartrisk.load_data import load_data
from heartrisk.utils import get_logger, save_initial_audit, save_text, setup_logging

logger = get_logger("run_eda")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Descriptive analysis of the heart-disease table.")
    parser.add_argument("csv", nargs="?", default=RAW_CSV, help="path to the patient CSV")
    args = parser.parse_args(argv)
    setup_logging(LOG_LEVEL)

    try:
        df = load_data(args.csv)
    except HeartRiskError as e:
        logger.error("EDA aborted: %s", e)
        return 1

    save_initial_audit(df, os.path.join(REPORTS_DIR, "audit"))
    run_eda(df, FIGS_DIR)

    summary = describe_by_target(df).round(3).to_string()
    for col, table in category_proportions(df).items():
        summary += f"\n\n{col} vs target (row proportions)\n" + table.round(3).to_string()
    summary_path = os.path.join(REPORTS_DIR, "eda_summary.txt")
    save_text(summary_path, summary + "\n")

    print(summary)
    print("EDA finished. Figures saved to:", FIGS_DIR)
    print("EDA summary saved to:", summary_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
