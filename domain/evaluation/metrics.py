"""
Sensitivity, specificity and predictive values for two-class problems.

For a 2x2 table with predictions on rows and the truth on columns

                  Truth
    Prediction    Event   No event
    Event           A        B
    No event        C        D

the formulas are

    Sensitivity = A / (A + C)
    Specificity = D / (B + D)
    Prevalence  = (A + C) / (A + B + C + D)
    PPV = (Sens * Prev) / ((Sens * Prev) + ((1 - Spec) * (1 - Prev)))
    NPV = (Spec * (1 - Prev)) / (((1 - Sens) * Prev) + (Spec * (1 - Prev)))

A rate over zero trials is undefined: every zero denominator yields NaN
instead of raising, and NaN inputs carry through to PPV and NPV.

References:
    Altman, D.G., Bland, J.M. (1994) "Diagnostic tests 1: sensitivity and
    specificity", British Medical Journal, vol 308, 1552.
    Altman, D.G., Bland, J.M. (1994) "Diagnostic tests 2: predictive
    values", British Medical Journal, vol 309, 102.
"""

import math
from collections.abc import Hashable, Sequence
from typing import Any

import pandas as pd

from domain.errors import InvalidInputError
from domain.evaluation.confusion import ConfusionMatrix
from domain.evaluation.inputs import as_confusion_matrix
from domain.schemas import BinaryMetrics
from infrastructure.config.models import MetricsConfig


def _safe_div(numer: float, denom: float) -> float:
    """numer / denom, or NaN when the denominator is zero."""
    return numer / denom if denom != 0 else math.nan


def resolve_event_levels(
    cm: ConfusionMatrix,
    positive: Hashable | None = None,
    negative: Hashable | None = None,
    config: MetricsConfig | None = None,
) -> tuple[Hashable, Hashable]:
    """
    Decide which level is the event (positive) and which is the non-event.

    An explicit positive or negative label always wins; otherwise
    config.event_first picks the first level (True) or the second (False).

    Returns:
        Tuple of (positive, negative)

    Raises:
        InvalidInputError: If the table is not 2x2 or a label is unknown
    """
    cfg = config or MetricsConfig()
    if cm.n_levels != 2:
        raise InvalidInputError(
            f"this metric is only defined for two classes, got a {cm.n_levels}x{cm.n_levels} table"
        )

    for label in (positive, negative):
        if label is not None:
            cm.index_of(label)
    if positive is not None and negative is not None and positive == negative:
        raise InvalidInputError(f"positive and negative must differ, both are {positive!r}")

    first, second = cm.levels
    if positive is None and negative is None:
        positive = first if cfg.event_first else second
    elif positive is None:
        positive = second if negative == first else first

    # hand back the stored labels
    positive = first if positive == first else second
    negative = second if positive == first else first
    return positive, negative


def resolve_prevalence(cm: ConfusionMatrix, positive: Hashable, prevalence: float | None = None) -> float:
    """Supplied prevalence, or the share of observations whose truth is the positive level."""
    if prevalence is None:
        return _safe_div(cm.column_total(positive), cm.total)

    try:
        value = float(prevalence)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"prevalence must be a number strictly between 0 and 1, got {prevalence!r}") from e
    if not math.isfinite(value) or not 0 < value < 1:
        raise InvalidInputError(f"prevalence must be strictly between 0 and 1, got {prevalence!r}")
    return value


def _sensitivity(cm: ConfusionMatrix, positive: Hashable) -> float:
    return _safe_div(cm.count(positive, positive), cm.column_total(positive))


def _specificity(cm: ConfusionMatrix, negative: Hashable) -> float:
    return _safe_div(cm.count(negative, negative), cm.column_total(negative))


def _ppv(sens: float, spec: float, prevalence: float) -> float:
    return _safe_div(sens * prevalence, (sens * prevalence) + ((1 - spec) * (1 - prevalence)))


def _npv(sens: float, spec: float, prevalence: float) -> float:
    return _safe_div(spec * (1 - prevalence), ((1 - sens) * prevalence) + (spec * (1 - prevalence)))


def _prepare(
    data: Any,
    truth: str | None,
    estimate: str | None,
    positive: Hashable | None,
    negative: Hashable | None,
    levels: Sequence[Hashable] | None,
    config: MetricsConfig | None,
) -> tuple[ConfusionMatrix, Hashable, Hashable]:
    cfg = config or MetricsConfig()
    cm = as_confusion_matrix(data, truth, estimate, levels=levels, na_policy=cfg.na_policy)
    pos, neg = resolve_event_levels(cm, positive, negative, cfg)
    return cm, pos, neg


def sensitivity(
    data: Any,
    truth: str | None = None,
    estimate: str | None = None,
    *,
    positive: Hashable | None = None,
    negative: Hashable | None = None,
    levels: Sequence[Hashable] | None = None,
    config: MetricsConfig | None = None,
) -> float:
    """
    Proportion of actual positives that were predicted positive.

    Args:
        data: Observations DataFrame (with truth/estimate), contingency
            table DataFrame, count matrix or ConfusionMatrix
        truth: Column name of the true classes (observations only)
        estimate: Column name of the predicted classes (observations only)
        positive: Event level; overrides config.event_first
        negative: Non-event level; the positive is then the other level
        levels: Label alphabet for observations or raw counts
        config: Evaluator settings (event_first, na_policy)

    Returns:
        Sensitivity in [0, 1], or NaN when there are no actual positives
    """
    cm, pos, _ = _prepare(data, truth, estimate, positive, negative, levels, config)
    return _sensitivity(cm, pos)


def specificity(
    data: Any,
    truth: str | None = None,
    estimate: str | None = None,
    *,
    positive: Hashable | None = None,
    negative: Hashable | None = None,
    levels: Sequence[Hashable] | None = None,
    config: MetricsConfig | None = None,
) -> float:
    """
    Proportion of actual negatives that were predicted negative.

    Takes the same arguments as sensitivity(). Returns NaN when there are
    no actual negatives.
    """
    cm, _, neg = _prepare(data, truth, estimate, positive, negative, levels, config)
    return _specificity(cm, neg)


def ppv(
    data: Any,
    truth: str | None = None,
    estimate: str | None = None,
    *,
    positive: Hashable | None = None,
    negative: Hashable | None = None,
    prevalence: float | None = None,
    levels: Sequence[Hashable] | None = None,
    config: MetricsConfig | None = None,
) -> float:
    """
    Positive predictive value: chance that a positive call is a true positive.

    prevalence, when given, must lie in (0, 1) and replaces the rate of
    positives observed in the table.
    """
    cm, pos, neg = _prepare(data, truth, estimate, positive, negative, levels, config)
    prev = resolve_prevalence(cm, pos, prevalence)
    return _ppv(_sensitivity(cm, pos), _specificity(cm, neg), prev)


def npv(
    data: Any,
    truth: str | None = None,
    estimate: str | None = None,
    *,
    positive: Hashable | None = None,
    negative: Hashable | None = None,
    prevalence: float | None = None,
    levels: Sequence[Hashable] | None = None,
    config: MetricsConfig | None = None,
) -> float:
    """Negative predictive value: chance that a negative call is a true negative."""
    cm, pos, neg = _prepare(data, truth, estimate, positive, negative, levels, config)
    prev = resolve_prevalence(cm, pos, prevalence)
    return _npv(_sensitivity(cm, pos), _specificity(cm, neg), prev)


def compute_binary_metrics(
    data: Any,
    truth: str | None = None,
    estimate: str | None = None,
    *,
    positive: Hashable | None = None,
    negative: Hashable | None = None,
    prevalence: float | None = None,
    levels: Sequence[Hashable] | None = None,
    config: MetricsConfig | None = None,
) -> tuple[BinaryMetrics, pd.DataFrame]:
    """
    Compute sensitivity, specificity, PPV and NPV from a single table.

    Args:
        data: Any input accepted by sensitivity()
        truth: Column name of the true classes (observations only)
        estimate: Column name of the predicted classes (observations only)
        positive: Event level; overrides config.event_first
        negative: Non-event level
        prevalence: Assumed prevalence for the predictive values
        levels: Label alphabet for observations or raw counts
        config: Evaluator settings

    Returns:
        Tuple of (BinaryMetrics, confusion_matrix DataFrame)
    """
    cm, pos, neg = _prepare(data, truth, estimate, positive, negative, levels, config)
    prev = resolve_prevalence(cm, pos, prevalence)
    sens = _sensitivity(cm, pos)
    spec = _specificity(cm, neg)

    metrics = BinaryMetrics(
        levels=list(cm.levels),
        positive=pos,
        negative=neg,
        confusion_matrix=[list(row) for row in cm.counts],
        n=cm.total,
        prevalence=prev,
        prevalence_source="empirical" if prevalence is None else "supplied",
        sensitivity=sens,
        specificity=spec,
        ppv=_ppv(sens, spec, prev),
        npv=_npv(sens, spec, prev),
    )
    return metrics, cm.to_frame()
