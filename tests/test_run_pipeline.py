import sys

from run_pipeline import build_steps


def test_eda_step_gets_only_the_csv():
    steps = dict(build_steps(["data.csv", "--seed", "7", "--train-fraction", "0.8"]))
    assert steps["EDA"] == [sys.executable, "run_eda.py", "data.csv"]
    assert steps["Evaluate"] == [
        sys.executable, "run_evaluate.py", "data.csv", "--seed", "7", "--train-fraction", "0.8",
    ]


def test_options_before_csv():
    steps = dict(build_steps(["--seed", "7", "data.csv"]))
    assert steps["EDA"][2:] == ["data.csv"]
    assert steps["Evaluate"][2:] == ["data.csv", "--seed", "7"]


def test_no_arguments_uses_defaults():
    steps = dict(build_steps([]))
    assert steps["EDA"] == [sys.executable, "run_eda.py"]
    assert steps["Evaluate"] == [sys.executable, "run_evaluate.py"]
