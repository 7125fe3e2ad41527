"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the evaluation workflow behind the CLI.
"""

from application.evaluation import log_evaluation_summary, run_evaluation
from application.serialize import save_confusion_matrix, save_metrics

__all__ = [
    # Main workflow
    "run_evaluation",
    "log_evaluation_summary",
    # Artifacts
    "save_metrics",
    "save_confusion_matrix",
]
