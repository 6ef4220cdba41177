import os
import warnings

from heartrisk.config import NUMERICAL
from heartrisk.eda import category_proportions, describe_by_target, plot_countplots, run_eda
from heartrisk.utils import save_initial_audit


def test_describe_by_target(heart_df):
    table = describe_by_target(heart_df)
    assert list(table.columns) == [0, 1]
    assert ("chol", "mean") in table.index
    assert len(table) == len(NUMERICAL) * 5


def test_category_proportions_rows_sum_to_one(heart_df):
    props = category_proportions(heart_df)
    for col, table in props.items():
        assert (table.sum(axis=1).round(6) == 1.0).all(), col


def test_run_eda_writes_figures(heart_df, tmp_path):
    paths = run_eda(heart_df, str(tmp_path))
    assert len(paths["histograms"]) == len(NUMERICAL)
    assert len(paths["qq"]) == 2
    for p in paths["histograms"] + paths["boxplots"] + paths["counts"] + [paths["corr"]]:
        assert os.path.isfile(p)


def test_initial_audit(heart_df, tmp_path):
    paths = save_initial_audit(heart_df, str(tmp_path / "audit"))
    text = open(paths["class_distribution"], encoding="utf-8").read()
    assert text.startswith("Value\tCount\tPercent")
    assert os.path.isfile(paths["describe"])


def test_countplots_without_palette_warning(heart_df, tmp_path):
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        paths = plot_countplots(heart_df, ["sex", "target"], str(tmp_path))
    assert all(os.path.isfile(p) for p in paths)
    assert not [w for w in caught if "palette" in str(w.message)]
