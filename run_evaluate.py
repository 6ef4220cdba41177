"""
run_evaluate.py
Fit logistic regression (baseline and stepwise tuned) and KNN (k=15, k=17)
on the train split and print the confusion matrix report for the test split.
"""
import argparse
import sys

from heartrisk.config import LOG_LEVEL, LOGS_DIR, RAW_CSV, SEED, TRAIN_FRACTION
from heartrisk.exceptions import HeartRiskError
from heartrisk.utils import get_logger, setup_logging
from heartrisk.workflow import run_workflow

logger = get_logger("run_evaluate")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Train and evaluate the heart-disease classifiers.")
    parser.add_argument("csv", nargs="?", default=RAW_CSV, help="path to the patient CSV")
    parser.add_argument("--seed", type=int, default=SEED)
    parser.add_argument("--train-fraction", type=float, default=TRAIN_FRACTION)
    args = parser.parse_args(argv)
    setup_logging(LOG_LEVEL, log_dir=LOGS_DIR, log_file="heartrisk.log")

    try:
        result = run_workflow(args.csv, train_fraction=args.train_fraction, seed=args.seed)
    except HeartRiskError as e:
        logger.error("Evaluation aborted: %s", e)
        return 1

    print(result["report"])
    print("Final evaluation completed. Summary:")
    for r in result["rows"]:
        print(f"- {r['run']}: acc={r['accuracy']:.4f}, recall={r['recall']:.4f}, "
              f"specificity={r['specificity']:.4f}, prec={r['precision']:.4f}")
    print("Saved final metrics to:", result["paths"].get("final_metrics"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
