"""Evaluation workflow and summary logging."""

import logging
import math
from pathlib import Path

import pandas as pd

from domain.evaluation.metrics import compute_binary_metrics
from domain.schemas import BinaryMetrics
from infrastructure.config.models import RunConfig

logger = logging.getLogger(__name__)


def run_evaluation(cfg: RunConfig, df: pd.DataFrame) -> tuple[BinaryMetrics, pd.DataFrame]:
    """
    Compute two-class metrics for the observations in df.

    Args:
        cfg: RunConfig instance (columns, levels, positive/negative, prevalence)
        df: DataFrame holding the truth and estimate columns

    Returns:
        Tuple of (metrics, confusion_matrix DataFrame)
    """
    logger.info(
        "Evaluating %d rows (truth=%s, estimate=%s, event_first=%s, na_policy=%s)",
        len(df),
        cfg.columns.truth_col,
        cfg.columns.estimate_col,
        cfg.metrics.event_first,
        cfg.metrics.na_policy.value,
    )

    metrics, cm_df = compute_binary_metrics(
        df,
        truth=cfg.columns.truth_col,
        estimate=cfg.columns.estimate_col,
        positive=cfg.positive,
        negative=cfg.negative,
        prevalence=cfg.prevalence,
        levels=cfg.levels,
        config=cfg.metrics,
    )

    dropped = len(df) - metrics.n
    if dropped:
        logger.warning("Ignored %d rows with a missing truth or estimate label", dropped)

    return metrics, cm_df


def _fmt(value: float) -> str:
    return "undefined" if math.isnan(value) else f"{value:.4f}"


def log_evaluation_summary(
    metrics: BinaryMetrics,
    cm_df: pd.DataFrame,
    metrics_path: Path,
    confusion_matrix_path: Path,
) -> None:
    """
    Log a concise, human-readable evaluation summary.

    Args:
        metrics: Computed metrics
        cm_df: Confusion matrix DataFrame
        metrics_path: Path to metrics JSON file
        confusion_matrix_path: Path to confusion matrix CSV file
    """
    logger.info("=== Evaluation Summary ===")
    logger.info("Positive level: %r (negative: %r), n=%d", metrics.positive, metrics.negative, metrics.n)
    logger.debug("Confusion matrix (rows=prediction, cols=truth):\n%s", cm_df)

    logger.info("Sensitivity: %s", _fmt(metrics.sensitivity))
    logger.info("Specificity: %s", _fmt(metrics.specificity))
    logger.info("Prevalence (%s): %s", metrics.prevalence_source, _fmt(metrics.prevalence))
    logger.info("PPV: %s", _fmt(metrics.ppv))
    logger.info("NPV: %s", _fmt(metrics.npv))

    logger.info("--- Artifacts ---")
    logger.info("Metrics JSON: %s", metrics_path)
    logger.info("Confusion matrix CSV: %s", confusion_matrix_path)
