"""Metric artifact serialization utilities."""

import json
import logging
from pathlib import Path

import pandas as pd

from application.constants import RUN_CONTEXT_KEY
from domain.schemas import BinaryMetrics

logger = logging.getLogger(__name__)


def save_metrics(metrics: BinaryMetrics, path: Path, run_context: dict[str, str] | None = None) -> Path:
    """
    Write metrics as JSON. Undefined (NaN) values are written as null.

    Args:
        metrics: Computed metrics
        path: Output JSON path
        run_context: Optional run metadata stored under "run"

    Returns:
        Path to the saved JSON file
    """
    # model_dump_json writes NaN as null
    payload = json.loads(metrics.model_dump_json())
    if run_context is not None:
        payload[RUN_CONTEXT_KEY] = run_context

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, allow_nan=False)

    logger.info("Saved metrics JSON: %s", path)
    return path


def save_confusion_matrix(cm_df: pd.DataFrame, path: Path) -> Path:
    """Write the confusion matrix (rows=prediction, cols=truth) as CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    cm_df.to_csv(path)
    logger.info("Saved confusion matrix CSV: %s", path)
    return path
