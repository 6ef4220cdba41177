"""
run_pipeline.py
End-to-end pipeline runner. Run from project root.

Sequence:
1. EDA: audit files, descriptive figures and summary
2. Evaluate: split, fit logistic and KNN models, report confusion matrices
3. Check that the key outputs exist

Only the CSV path goes to the EDA step; options such as --seed and
--train-fraction go to the evaluation step.
"""

import argparse
import sys
from pathlib import Path
import subprocess


def build_steps(argv):
    parser = argparse.ArgumentParser(description="Run EDA then evaluation.")
    parser.add_argument("csv", nargs="?", default=None, help="path to the patient CSV")
    parser.add_argument("--seed", default=None)
    parser.add_argument("--train-fraction", default=None)
    args = parser.parse_args(argv)
    csv = [args.csv] if args.csv else []
    rest = []
    if args.seed is not None:
        rest += ["--seed", args.seed]
    if args.train_fraction is not None:
        rest += ["--train-fraction", args.train_fraction]
    return [
        ("EDA", [sys.executable, "run_eda.py", *csv]),
        ("Evaluate", [sys.executable, "run_evaluate.py", *csv, *rest]),
    ]


def run_step(name, cmd):
    print(f"=== Step: {name} ===")
    print("Running:", " ".join(cmd))
    rc = subprocess.call(cmd)
    if rc != 0:
        raise SystemExit(f"Step '{name}' failed with exit code {rc}")


def check_expected_outputs():
    expected = [
        "reports/results/final_metrics.csv",
        "reports/results/evaluation_report.txt",
        "reports/eda_summary.txt",
    ]
    errs = [p for p in expected if not Path(p).exists()]
    if errs:
        print("Warning: expected outputs missing:")
        for e in errs:
            print(" -", e)
    else:
        print("All key outputs present.")


def main():
    for name, cmd in build_steps(sys.argv[1:]):
        run_step(name, cmd)
    check_expected_outputs()
    print("Pipeline finished successfully.")


if __name__ == "__main__":
    main()
