"""Normalize the accepted input shapes to a ConfusionMatrix."""

from collections.abc import Hashable, Sequence
from typing import Any

import pandas as pd

from domain.errors import InvalidInputError
from domain.evaluation.confusion import ConfusionMatrix, build_confusion_matrix
from infrastructure.config.models import NaPolicy


def _get_column(df: pd.DataFrame, name: str) -> pd.Series:
    if name not in df.columns:
        raise InvalidInputError(f"Required column '{name}' not found in DataFrame.")
    return df[name]


def as_confusion_matrix(
    data: Any,
    truth: str | None = None,
    estimate: str | None = None,
    *,
    levels: Sequence[Hashable] | None = None,
    na_policy: NaPolicy | str = NaPolicy.STRIP,
) -> ConfusionMatrix:
    """
    Turn observations, a contingency table or a count matrix into a ConfusionMatrix.

    - DataFrame plus truth/estimate column names: observations, tabulated here
    - DataFrame alone: contingency table (index=predictions, columns=truth)
    - ConfusionMatrix: returned unchanged
    - anything else 2-D (numpy array, nested lists): raw counts

    Args:
        data: Input in one of the shapes above
        truth: Column holding the true classes (observations only)
        estimate: Column holding the predicted classes (observations only)
        levels: Label alphabet for observations or raw counts
        na_policy: Missing-label handling for observations

    Returns:
        ConfusionMatrix
    """
    has_columns = truth is not None or estimate is not None

    if isinstance(data, ConfusionMatrix):
        if has_columns:
            raise InvalidInputError("truth/estimate columns only apply to observation data frames")
        return data

    if isinstance(data, pd.DataFrame):
        if has_columns:
            if truth is None or estimate is None:
                raise InvalidInputError("both truth and estimate column names are required")
            return build_confusion_matrix(
                _get_column(data, truth),
                _get_column(data, estimate),
                levels=levels,
                na_policy=na_policy,
            )
        return ConfusionMatrix.from_frame(data)

    if has_columns:
        raise InvalidInputError("truth/estimate columns only apply to observation data frames")
    return ConfusionMatrix.from_counts(data, levels=levels)
