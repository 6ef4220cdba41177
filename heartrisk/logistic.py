"""
Binomial logistic regression fitted by IRLS (statsmodels GLM) with optional
backward stepwise elimination on an information criterion.

Categorical columns (pandas ``category`` dtype) enter the formula as
treatment-coded factors, so stepwise elimination drops a whole factor at a
time rather than single dummy columns.
"""

import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm
import statsmodels.formula.api as smf
from statsmodels.tools.sm_exceptions import (
    ConvergenceWarning,
    PerfectSeparationError,
    PerfectSeparationWarning,
)

from .config import LOGISTIC_FEATURES, MAX_ITER, STEPWISE_CRITERION, TARGET, THRESHOLD
from .exceptions import FitError, InvalidParameterError, SchemaError
from .utils import get_logger

logger = get_logger(__name__)

CRITERIA = ("aic", "bic")


@dataclass
class StepwiseResult:
    selected: List[str]
    history: List[Tuple[str, float]] = field(default_factory=list)

    def steps(self) -> List[str]:
        return [f"{label}: {value:.4f}" for label, value in self.history]


def _is_categorical(series: pd.Series) -> bool:
    return isinstance(series.dtype, pd.CategoricalDtype)


def build_formula(target: str, features: Sequence[str], data: pd.DataFrame) -> str:
    terms = [f"C({f})" if _is_categorical(data[f]) else f for f in features]
    return f"{target} ~ " + (" + ".join(terms) if terms else "1")


def information_criterion(result, criterion: str = "aic") -> float:
    if criterion == "aic":
        return float(result.aic)
    if criterion == "bic":
        return float(result.bic_llf)
    raise InvalidParameterError(f"Unknown criterion '{criterion}', expected one of {CRITERIA}")


class LogisticModel:
    """Logistic regression on a fixed term set with a probability threshold."""

    def __init__(self, features: Sequence[str] = LOGISTIC_FEATURES, target: str = TARGET,
                 threshold: float = THRESHOLD, max_iter: int = MAX_ITER) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise InvalidParameterError(f"threshold must lie in [0, 1], got {threshold}")
        self.features = list(features)
        self.target = target
        self.threshold = threshold
        self.max_iter = max_iter
        self.result = None
        self.formula: Optional[str] = None
        self.levels: Dict[str, list] = {}
        self.stepwise_result: Optional[StepwiseResult] = None

    def _frame(self, df: pd.DataFrame) -> pd.DataFrame:
        data = df[self.features + ([self.target] if self.target in df.columns else [])].copy()
        if self.target in data.columns:
            data[self.target] = data[self.target].astype(int)
        return data

    def _align_levels(self, data: pd.DataFrame) -> pd.DataFrame:
        # factor levels must match the ones seen at fit time
        for col, levels in self.levels.items():
            unseen = sorted(set(data[col].dropna().tolist()) - set(levels))
            if unseen:
                raise SchemaError(
                    f"Column '{col}' has levels {unseen} not seen when fitting (known levels {levels})"
                )
            data[col] = pd.Categorical(data[col], categories=levels)
        return data

    def fit(self, train: pd.DataFrame) -> "LogisticModel":
        data = self._frame(train)
        self.levels = {}
        for col in self.features:
            if _is_categorical(data[col]):
                data[col] = data[col].cat.remove_unused_categories()
                self.levels[col] = data[col].cat.categories.tolist()
        self.formula = build_formula(self.target, self.features, data)
        model = smf.glm(self.formula, data=data, family=sm.families.Binomial())

        if np.linalg.matrix_rank(model.exog) < model.exog.shape[1]:
            raise FitError(
                f"Singular design for '{self.formula}' on {len(data)} rows "
                f"({model.exog.shape[1]} columns, rank {np.linalg.matrix_rank(model.exog)})"
            )

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                result = model.fit(method="IRLS", maxiter=self.max_iter)
            except (PerfectSeparationError, np.linalg.LinAlgError) as e:
                raise FitError(f"Fit of '{self.formula}' on {len(data)} rows failed: {e}") from e

        problems = [w for w in caught if issubclass(w.category, (ConvergenceWarning, PerfectSeparationWarning))]
        if problems or not getattr(result, "converged", True) or not np.all(np.isfinite(result.params)):
            detail = "; ".join(str(w.message) for w in problems) or "IRLS did not converge"
            raise FitError(
                f"Fit of '{self.formula}' on {len(data)} rows did not converge within {self.max_iter} iterations: {detail}"
            )

        self.result = result
        logger.info("Fitted %s (AIC=%.3f, n=%d)", self.formula, result.aic, len(data))
        return self

    @property
    def fitted(self) -> bool:
        return self.result is not None

    def _check_fitted(self):
        if not self.fitted:
            raise RuntimeError("LogisticModel is not fitted. Call fit() first.")

    def predict_proba(self, df: pd.DataFrame) -> np.ndarray:
        self._check_fitted()
        return np.asarray(self.result.predict(self._align_levels(self._frame(df))), dtype=float)

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        return (self.predict_proba(df) > self.threshold).astype(int)

    def criterion(self, criterion: str = "aic") -> float:
        self._check_fitted()
        return information_criterion(self.result, criterion)

    def summary(self) -> pd.DataFrame:
        self._check_fitted()
        return pd.DataFrame({
            "coef": self.result.params,
            "std_err": self.result.bse,
            "z": self.result.tvalues,
            "p_value": self.result.pvalues,
        })

    def _with_features(self, features: Sequence[str]) -> "LogisticModel":
        return LogisticModel(features, target=self.target, threshold=self.threshold, max_iter=self.max_iter)

    def stepwise(self, train: pd.DataFrame, criterion: str = STEPWISE_CRITERION) -> "LogisticModel":
        """
        Backward elimination starting from this model's features.

        Each pass refits the model without each remaining term and removes the
        term whose removal gives the lowest criterion, provided it is strictly
        lower than the current one. Candidate fits that fail are skipped.
        Returns a new fitted model on the surviving terms.
        """
        if criterion not in CRITERIA:
            raise InvalidParameterError(f"Unknown criterion '{criterion}', expected one of {CRITERIA}")

        current = self._with_features(self.features).fit(train)
        current_value = current.criterion(criterion)
        selected = list(self.features)
        history = [("start", current_value)]
        logger.info("Backward elimination start: %s=%.4f with %d terms", criterion.upper(), current_value, len(selected))

        while selected:
            best_value = current_value
            best_drop = None
            best_model = None
            for term in selected:
                candidate = self._with_features([f for f in selected if f != term])
                try:
                    candidate.fit(train)
                except FitError as e:
                    logger.warning("Skipping removal of %s: %s", term, e)
                    continue
                value = candidate.criterion(criterion)
                if value < best_value:
                    best_value, best_drop, best_model = value, term, candidate

            if best_drop is None:
                break
            selected.remove(best_drop)
            current, current_value = best_model, best_value
            history.append((f"- {best_drop}", current_value))
            logger.info("Backward: removing %s (%s -> %.4f)", best_drop, criterion.upper(), current_value)

        current.stepwise_result = StepwiseResult(selected=selected, history=history)
        logger.info("Backward elimination kept %d of %d terms: %s", len(selected), len(self.features), selected)
        return current
