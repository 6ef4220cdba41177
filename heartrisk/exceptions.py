"""Custom exceptions for the heart-disease analysis workflow."""


class HeartRiskError(Exception):
    """Base exception for the workflow."""

    pass


class MissingFileError(HeartRiskError, FileNotFoundError):
    """Raised when the input table cannot be found or read."""

    pass


class SchemaError(HeartRiskError):
    """Raised when expected columns are absent or hold invalid values."""

    pass


class DegenerateColumnError(HeartRiskError):
    """Raised when a numeric column has zero variance in the training rows."""

    def __init__(self, column: str, n_rows: int) -> None:
        self.column = column
        self.n_rows = n_rows
        super().__init__(
            f"Column '{column}' has zero standard deviation over {n_rows} training rows; cannot scale."
        )


class FitError(HeartRiskError):
    """Raised when the regression fit fails to converge."""

    pass


class UndefinedMetricError(HeartRiskError, ZeroDivisionError):
    """Raised when a derived metric has a zero denominator."""

    pass


class InvalidParameterError(HeartRiskError, ValueError):
    """Raised when a run constant (fraction, k, threshold) is out of range."""

    pass
