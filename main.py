"""
CLI entrypoint for the two-class metrics pipeline.

This script performs the following steps:
- loads an optional .env, then configs/metrics.yaml
- creates a per-run output folder under outputs/
- reads the truth/estimate columns from the observations file
- builds the confusion matrix and computes sensitivity, specificity, PPV, NPV
- saves metrics JSON, confusion matrix CSV and the resolved config
- logs a human-readable summary of results
"""

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from application import (
    log_evaluation_summary,
    run_evaluation,
    save_confusion_matrix,
    save_metrics,
)
from application.constants import (
    CONFIG_SNAPSHOT_FILENAME,
    CONFUSION_MATRIX_FILENAME,
    LOG_FILENAME,
    METRICS_FILENAME,
)
from infrastructure.config import load_run_config
from infrastructure.constants import METRICS_CONFIG_FILE
from infrastructure.io import ensure_exists, make_run_dir, read_observations
from infrastructure.observability import configure_logging, get_log_context, make_run_tag, set_log_context

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compute sensitivity, specificity and predictive values")
    p.add_argument(
        "--config",
        type=str,
        default=str(METRICS_CONFIG_FILE),
        help="Path to metrics.yaml (default: configs/metrics.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded if present (default: .env)",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level",
    )
    return p.parse_args()


def main() -> None:
    args = _parse_args()

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    config_path = Path(args.config)
    ensure_exists(config_path, "metrics.yaml")

    cfg = load_run_config(config_path)

    # ---- Per-run output folder ----
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = f"{ts}_{cfg.data_file_path.stem}_eventfirst{int(cfg.metrics.event_first)}"
    run_dir = make_run_dir(cfg.output_root, run_id)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
    )
    set_log_context(run_id_full=run_id, dataset=cfg.data_file_path.name)

    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    (run_dir / CONFIG_SNAPSHOT_FILENAME).write_text(
        json.dumps(cfg.model_dump(mode="json"), ensure_ascii=False, indent=2, default=str),
        encoding="utf-8",
    )

    logger.info("Loading observations from %s...", cfg.data_file_path)
    df = read_observations(cfg.data_file_path, [cfg.columns.truth_col, cfg.columns.estimate_col])
    logger.info("Observations loaded: %d rows", df.shape[0])

    metrics, cm_df = run_evaluation(cfg, df)

    metrics_path = save_metrics(metrics, run_dir / METRICS_FILENAME, run_context=get_log_context())
    cm_path = save_confusion_matrix(cm_df, run_dir / CONFUSION_MATRIX_FILENAME)

    log_evaluation_summary(
        metrics=metrics,
        cm_df=cm_df,
        metrics_path=metrics_path,
        confusion_matrix_path=cm_path,
    )

    logger.info("Detailed log: %s", log_path)


if __name__ == "__main__":
    main()
