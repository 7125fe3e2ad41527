"""
Run-scoped logging for metric evaluations.

Every record is stamped with a short run tag and the name of the dataset
being evaluated, read from contextvars. Output goes to the console and,
when a run folder exists, to a rotating log file inside it.
"""

import contextvars
import hashlib
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Printed on every line
cv_run_tag = contextvars.ContextVar("run_tag", default="-")
cv_dataset = contextvars.ContextVar("dataset", default="-")

# Attached to artifacts only
cv_run_id_full = contextvars.ContextVar("run_id_full", default="-")


def make_run_tag(run_id_full: str, length: int = 8) -> str:
    """Short hex tag for a run id (BLAKE2s digest prefix)."""
    h = hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()
    return h[:length]


class ContextInjectFilter(logging.Filter):
    """Copy the current run tag and dataset onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = cv_run_tag.get() or "-"
        record.dataset = cv_dataset.get() or "-"
        return True


def set_log_context(
    *,
    run_id_full: str | None = None,
    dataset: str | None = None,
) -> None:
    """Set the run and/or dataset shown in subsequent log lines."""
    if run_id_full is not None:
        cv_run_id_full.set(str(run_id_full))
        cv_run_tag.set(make_run_tag(str(run_id_full)))

    if dataset is not None:
        cv_dataset.set(str(dataset))


def get_log_context() -> dict[str, str]:
    """Current run metadata, as stored next to the metrics JSON."""
    return {
        "run_tag": str(cv_run_tag.get() or "-"),
        "run_id_full": str(cv_run_id_full.get() or "-"),
        "dataset": str(cv_dataset.get() or "-"),
    }


CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] r=%(run)s d=%(dataset)s | %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | r=%(run)s d=%(dataset)s | %(message)s"


def _attach(root: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(ContextInjectFilter())
    root.addHandler(handler)


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Replace the root handlers with a console handler and an optional run log.

    Args:
        log_file: Run log path; None logs to the console only
        console_level: Console threshold (default: INFO)
        file_level: Run log threshold (default: DEBUG)
        max_bytes: Size at which the run log rotates
        backup_count: Rotated run logs to keep
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    _attach(root, logging.StreamHandler(), console_level, logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(
            root,
            RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"),
            file_level,
            logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"),
        )

    # openpyxl is chatty while pandas reads .xlsx
    logging.getLogger("openpyxl").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        log_file if log_file is not None else "console only",
    )
