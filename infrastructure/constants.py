from pathlib import Path

# Repo-root conventional directories/files (overrideable via metrics.yaml)
CONFIG_DIR = Path("configs")
METRICS_CONFIG_FILE = CONFIG_DIR / "metrics.yaml"

DATA_DIR = Path("dataset")
OUTPUT_ROOT = Path("outputs")

# Session-level override for MetricsConfig.event_first
EVENT_FIRST_ENV_VAR = "METRICS_EVENT_FIRST"
