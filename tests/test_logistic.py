import numpy as np
import pandas as pd
import pytest

from heartrisk.config import LOGISTIC_FEATURES
from heartrisk.exceptions import FitError, InvalidParameterError, SchemaError
from heartrisk.logistic import LogisticModel
from heartrisk.prepare_inputs import split_dataset


@pytest.fixture
def split(heart_df):
    return split_dataset(heart_df, train_fraction=0.75, seed=123)


def test_fit_and_predict(split):
    model = LogisticModel(LOGISTIC_FEATURES).fit(split.train)
    proba = model.predict_proba(split.test)
    assert proba.shape == (len(split.test),)
    assert ((proba >= 0) & (proba <= 1)).all()
    labels = model.predict(split.test)
    assert set(np.unique(labels)) <= {0, 1}
    np.testing.assert_array_equal(labels, (proba > 0.5).astype(int))


def test_categoricals_enter_as_factors(split):
    model = LogisticModel(LOGISTIC_FEATURES).fit(split.train)
    assert "C(cp)" in model.formula
    assert "C(age)" not in model.formula
    # cp has four levels -> three treatment dummies
    assert sum(name.startswith("C(cp)") for name in model.summary().index) == 3


def test_threshold_moves_labels(split):
    low = LogisticModel(LOGISTIC_FEATURES, threshold=0.0).fit(split.train)
    high = LogisticModel(LOGISTIC_FEATURES, threshold=1.0).fit(split.train)
    assert low.predict(split.test).sum() == len(split.test)
    assert high.predict(split.test).sum() == 0


@pytest.mark.parametrize("threshold", [-0.1, 1.2])
def test_invalid_threshold(threshold):
    with pytest.raises(InvalidParameterError):
        LogisticModel(LOGISTIC_FEATURES, threshold=threshold)


def test_stepwise_never_increases_criterion(split):
    baseline = LogisticModel(LOGISTIC_FEATURES).fit(split.train)
    tuned = baseline.stepwise(split.train, criterion="aic")
    history = [value for _, value in tuned.stepwise_result.history]
    assert all(b < a for a, b in zip(history, history[1:]))
    assert set(tuned.features) <= set(LOGISTIC_FEATURES)
    assert tuned.criterion("aic") <= baseline.criterion("aic")
    assert tuned.stepwise_result.selected == tuned.features
    assert len(tuned.stepwise_result.history) == len(LOGISTIC_FEATURES) - len(tuned.features) + 1


def test_stepwise_drops_noise_feature(split):
    train = split.train.copy()
    train["noise"] = np.random.RandomState(5).normal(size=len(train))
    model = LogisticModel(["oldpeak", "thalach", "noise"]).fit(train)
    tuned = model.stepwise(train, criterion="bic")
    assert "noise" not in tuned.features


def test_stepwise_unknown_criterion(split):
    with pytest.raises(InvalidParameterError):
        LogisticModel(LOGISTIC_FEATURES).stepwise(split.train, criterion="r2")


def test_singular_design_raises(split):
    train = split.train.copy()
    train["age_copy"] = train["age"]
    with pytest.raises(FitError, match="Singular"):
        LogisticModel(["age", "age_copy"]).fit(train)


def test_non_convergence_raises(split):
    with pytest.raises(FitError, match="converge"):
        LogisticModel(LOGISTIC_FEATURES, max_iter=1).fit(split.train)


def test_predict_before_fit(split):
    with pytest.raises(RuntimeError):
        LogisticModel(LOGISTIC_FEATURES).predict(split.test)


def test_level_missing_from_train_is_dropped(heart_df):
    train = heart_df[heart_df["cp"] != 3]
    model = LogisticModel(LOGISTIC_FEATURES).fit(train)
    assert model.levels["cp"] == [0, 1, 2]
    assert sum(name.startswith("C(cp)") for name in model.summary().index) == 2

    proba = model.predict_proba(train.head(20))
    assert proba.shape == (20,)

    with pytest.raises(SchemaError) as exc:
        model.predict(heart_df)
    assert "cp" in str(exc.value) and "[3]" in str(exc.value)


def test_stepwise_returns_new_model_when_nothing_dropped(split):
    model = LogisticModel(["oldpeak", "thalach"]).fit(split.train)
    tuned = model.stepwise(split.train, criterion="aic")
    assert tuned is not model
    assert tuned.features == ["oldpeak", "thalach"]
    assert model.stepwise_result is None
    assert tuned.stepwise_result.history == [("start", pytest.approx(model.criterion("aic")))]
