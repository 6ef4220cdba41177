"""Heart-disease train/evaluate workflow: logistic regression and KNN."""

__version__ = "0.1.0"
