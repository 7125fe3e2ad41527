"""Application-level constants."""

# Output filenames
METRICS_FILENAME = "metrics.json"
CONFUSION_MATRIX_FILENAME = "confusion_matrix.csv"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
LOG_FILENAME = "run.log"

# Keys added to the metrics artifact
RUN_CONTEXT_KEY = "run"
