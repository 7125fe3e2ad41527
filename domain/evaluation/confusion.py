"""Confusion matrix construction from paired label sequences."""

import logging
from collections.abc import Hashable, Sequence
from itertools import chain
from typing import Any

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from sklearn.metrics import confusion_matrix

from domain.errors import InvalidInputError
from infrastructure.config.models import NaPolicy

logger = logging.getLogger(__name__)

PREDICTION_AXIS = "Prediction"
TRUTH_AXIS = "Truth"


class ConfusionMatrix(BaseModel):
    """
    Square contingency table of counts.

    counts[i][j] is the number of observations predicted as levels[i] whose
    true class is levels[j]. Rows are predictions, columns are the truth, and
    both axes share the same alphabet in the same order.
    """

    model_config = ConfigDict(frozen=True)

    levels: tuple[Any, ...]
    counts: tuple[tuple[int, ...], ...]

    @model_validator(mode="after")
    def _validate(self) -> "ConfusionMatrix":
        n = len(self.levels)
        if n < 2:
            raise ValueError(f"a confusion matrix needs at least two levels, got {list(self.levels)}")
        try:
            n_unique = len(set(self.levels))
        except TypeError as e:
            raise ValueError(f"levels must be hashable, got {list(self.levels)}") from e
        if n_unique != n:
            raise ValueError(f"levels must be unique, got {list(self.levels)}")

        if len(self.counts) != n or any(len(row) != n for row in self.counts):
            raise ValueError(f"counts must be a {n}x{n} table to match levels {list(self.levels)}")
        if any(value < 0 for row in self.counts for value in row):
            raise ValueError("counts must be non-negative")
        return self

    @classmethod
    def _create(cls, levels: Sequence[Hashable], counts: list[list[int]]) -> "ConfusionMatrix":
        try:
            return cls(levels=tuple(levels), counts=tuple(tuple(row) for row in counts))
        except ValidationError as e:
            raise InvalidInputError(str(e)) from e

    @classmethod
    def from_counts(cls, counts: Any, levels: Sequence[Hashable] | None = None) -> "ConfusionMatrix":
        """
        Build from any 2-D array-like of counts (rows=prediction, cols=truth).

        Args:
            counts: numpy array or nested sequence of non-negative whole numbers
            levels: Labels shared by both axes; defaults to 0..N-1

        Raises:
            InvalidInputError: If the table is not square or holds invalid counts
        """
        try:
            arr = np.asarray(counts)
        except ValueError as e:
            raise InvalidInputError(f"counts could not be read as a table: {e}") from e

        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise InvalidInputError(f"counts must be a square table, got shape {arr.shape}")
        if not np.issubdtype(arr.dtype, np.integer) and not np.issubdtype(arr.dtype, np.floating):
            raise InvalidInputError(f"counts must be numeric, got dtype {arr.dtype}")
        if not np.all(np.isfinite(arr)):
            raise InvalidInputError("counts must be finite")
        if np.any(arr < 0):
            raise InvalidInputError("counts must be non-negative")
        if np.any(arr != np.round(arr)):
            raise InvalidInputError("counts must be whole numbers")

        if levels is None:
            levels = range(arr.shape[0])
        levels = [_plain(v) for v in levels]
        if len(levels) != arr.shape[0]:
            raise InvalidInputError(f"got {len(levels)} levels for a {arr.shape[0]}x{arr.shape[1]} table")

        return cls._create(levels, arr.astype(np.int64).tolist())

    @classmethod
    def from_frame(cls, table: pd.DataFrame) -> "ConfusionMatrix":
        """Build from a contingency table with predictions as index and truth as columns."""
        rows = list(table.index)
        cols = list(table.columns)
        if len(rows) != len(cols):
            raise InvalidInputError(f"the table must have as many rows as columns, got {table.shape}")
        if rows != cols:
            raise InvalidInputError(f"the table must have the same labels in the same order, got rows={rows} cols={cols}")
        return cls.from_counts(table.to_numpy(), levels=cols)

    @property
    def n_levels(self) -> int:
        return len(self.levels)

    @property
    def total(self) -> int:
        return sum(sum(row) for row in self.counts)

    def index_of(self, label: Hashable) -> int:
        try:
            return self.levels.index(label)
        except ValueError as e:
            raise InvalidInputError(f"{label!r} is not one of the levels {list(self.levels)}") from e

    def count(self, predicted: Hashable, truth: Hashable) -> int:
        return self.counts[self.index_of(predicted)][self.index_of(truth)]

    def column_total(self, truth: Hashable) -> int:
        j = self.index_of(truth)
        return sum(row[j] for row in self.counts)

    def row_total(self, predicted: Hashable) -> int:
        return sum(self.counts[self.index_of(predicted)])

    def as_array(self) -> np.ndarray:
        return np.array(self.counts, dtype=np.int64)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self.as_array(),
            index=pd.Index(list(self.levels), name=PREDICTION_AXIS),
            columns=pd.Index(list(self.levels), name=TRUTH_AXIS),
        )


def _plain(value: Any) -> Any:
    """Unwrap numpy scalars so labels stay plain Python values."""
    return value.item() if isinstance(value, np.generic) else value


def _as_label_array(values: Any, name: str) -> np.ndarray:
    if isinstance(values, str | bytes):
        raise InvalidInputError(f"{name} must be a sequence of labels, not a single string")
    if isinstance(values, pd.Series | pd.Index | pd.Categorical):
        arr = np.asarray(values.astype(object))
    else:
        arr = np.asarray(list(values), dtype=object)
    if arr.ndim != 1:
        raise InvalidInputError(f"{name} must be one-dimensional, got shape {arr.shape}")
    return np.fromiter((_plain(v) for v in arr), dtype=object, count=len(arr))


def _declared_levels(values: Any) -> list[Any] | None:
    """Categories carried by a categorical input, if any."""
    dtype = getattr(values, "dtype", None)
    if isinstance(dtype, pd.CategoricalDtype):
        return [_plain(v) for v in dtype.categories]
    return None


def strip_missing_pairs(truth: np.ndarray, estimate: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Drop every (truth, estimate) pair where either side is missing.

    Args:
        truth: True labels (1-D, same length as estimate)
        estimate: Predicted labels

    Returns:
        Tuple of (truth, estimate) restricted to complete pairs
    """
    keep = ~(pd.isna(truth) | pd.isna(estimate))
    dropped = int(len(keep) - keep.sum())
    if dropped:
        logger.debug("Dropped %d of %d observation pairs with missing labels", dropped, len(keep))
    return truth[keep], estimate[keep]


def _resolve_levels(
    levels: Sequence[Hashable] | None,
    truth: Any,
    estimate: Any,
    truth_arr: np.ndarray,
    estimate_arr: np.ndarray,
) -> list[Any]:
    if levels is not None:
        resolved = [_plain(v) for v in levels]
    else:
        declared_truth = _declared_levels(truth)
        declared_estimate = _declared_levels(estimate)
        if declared_truth is not None and declared_estimate is not None and declared_truth != declared_estimate:
            raise InvalidInputError(
                f"truth and estimate must share the same levels, got {declared_truth} and {declared_estimate}"
            )
        resolved = declared_truth if declared_truth is not None else declared_estimate
        if resolved is None:
            try:
                resolved = sorted(set(chain(truth_arr, estimate_arr)))
            except TypeError as e:
                raise InvalidInputError("levels could not be ordered; pass them explicitly") from e

    try:
        n_unique = len(set(resolved))
    except TypeError as e:
        raise InvalidInputError(f"levels must be hashable, got {resolved}") from e
    if n_unique != len(resolved):
        raise InvalidInputError(f"levels must be unique, got {resolved}")
    if len(resolved) < 2:
        raise InvalidInputError(f"at least two possible classes are required, got {resolved}")
    return resolved


def build_confusion_matrix(
    truth: Any,
    estimate: Any,
    levels: Sequence[Hashable] | None = None,
    na_policy: NaPolicy | str = NaPolicy.STRIP,
) -> ConfusionMatrix:
    """
    Tabulate (estimate, truth) pairs over the full label alphabet.

    Every level gets a row and a column, including levels with no observations.

    Args:
        truth: True class labels (sequence, numpy array or pandas Series)
        estimate: Predicted class labels, same length as truth
        levels: Label alphabet in order. Defaults to the categories of a
            categorical input, else the sorted observed labels.
        na_policy: "strip" drops incomplete pairs, "fail" rejects them

    Returns:
        ConfusionMatrix with predictions as rows and truth as columns

    Raises:
        InvalidInputError: On length mismatch, no usable observations,
            fewer than two levels, labels outside the alphabet or an
            unknown na_policy
    """
    truth_arr = _as_label_array(truth, "truth")
    estimate_arr = _as_label_array(estimate, "estimate")
    if len(truth_arr) != len(estimate_arr):
        raise InvalidInputError(
            f"truth and estimate must have the same length, got {len(truth_arr)} and {len(estimate_arr)}"
        )

    try:
        policy = NaPolicy(na_policy)
    except ValueError as e:
        raise InvalidInputError(
            f"na_policy must be one of {[p.value for p in NaPolicy]}, got {na_policy!r}"
        ) from e

    if policy is NaPolicy.FAIL:
        n_missing = int(pd.isna(truth_arr).sum() + pd.isna(estimate_arr).sum())
        if n_missing:
            raise InvalidInputError(f"found {n_missing} missing labels with na_policy='fail'")
    else:
        truth_arr, estimate_arr = strip_missing_pairs(truth_arr, estimate_arr)

    if len(truth_arr) == 0:
        raise InvalidInputError("no observations left to tabulate")

    alphabet = _resolve_levels(levels, truth, estimate, truth_arr, estimate_arr)
    index = {label: i for i, label in enumerate(alphabet)}

    unknown = {value for value in chain(truth_arr, estimate_arr) if value not in index}
    if unknown:
        raise InvalidInputError(f"labels {sorted(map(repr, unknown))} are not among the levels {alphabet}")

    truth_codes = np.fromiter((index[v] for v in truth_arr), dtype=np.int64, count=len(truth_arr))
    estimate_codes = np.fromiter((index[v] for v in estimate_arr), dtype=np.int64, count=len(estimate_arr))

    # sklearn puts the truth on rows
    cm = confusion_matrix(truth_codes, estimate_codes, labels=np.arange(len(alphabet)))
    return ConfusionMatrix._create(alphabet, cm.T.tolist())
