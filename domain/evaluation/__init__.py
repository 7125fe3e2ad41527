"""
Confusion matrices and two-class evaluation metrics.

Provides:
- ConfusionMatrix and the builder that tabulates paired labels
- Input normalisation (observations, contingency tables, count matrices)
- Sensitivity, specificity, PPV and NPV

All functions are pure (depend only on numpy, pandas, sklearn, pydantic).
"""

from domain.evaluation.confusion import ConfusionMatrix, build_confusion_matrix, strip_missing_pairs
from domain.evaluation.inputs import as_confusion_matrix
from domain.evaluation.metrics import (
    compute_binary_metrics,
    npv,
    ppv,
    resolve_event_levels,
    resolve_prevalence,
    sensitivity,
    specificity,
)

__all__ = [
    "ConfusionMatrix",
    "build_confusion_matrix",
    "strip_missing_pairs",
    "as_confusion_matrix",
    "sensitivity",
    "specificity",
    "ppv",
    "npv",
    "compute_binary_metrics",
    "resolve_event_levels",
    "resolve_prevalence",
]
