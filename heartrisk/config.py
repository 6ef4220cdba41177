import os

# Reproducibility
SEED = 123
TRAIN_FRACTION = 0.75

# File locations
RAW_CSV = os.path.join("data", "raw", "heart_dataset.csv")
REPORTS_DIR = "reports"
FIGS_DIR = os.path.join(REPORTS_DIR, "figs")
RESULTS_DIR = os.path.join(REPORTS_DIR, "results")
LOGS_DIR = "logs"
LOG_LEVEL = "INFO"

# Schema
NUMERICAL = ["age", "trestbps", "chol", "thalach", "oldpeak"]
CATEGORICAL = ["sex", "cp", "fbs", "exang"]
TARGET = "target"
REQUIRED_COLUMNS = NUMERICAL + CATEGORICAL + [TARGET]

# Logistic regression
LOGISTIC_FEATURES = NUMERICAL + CATEGORICAL
THRESHOLD = 0.5                       # probability cut-off for a positive label
STEPWISE_CRITERION = "aic"            # options: "aic", "bic"
MAX_ITER = 100                        # IRLS iterations before the fit counts as non-converged

# KNN
KNN_FEATURES = NUMERICAL              # z-scored columns used for distances
K_VALUES = [15, 17]                   # the two reported KNN runs
K_GRID = [3, 5, 7, 9, 11, 13, 15, 17, 19, 21]
TUNING_METRIC = "recall"              # missed disease is the costly error

# Evaluation
POSITIVE_LABEL = 1
