"""Pydantic models for evaluation results."""

from typing import Any, Literal

from pydantic import BaseModel, Field

PrevalenceSource = Literal["empirical", "supplied"]


class BinaryMetrics(BaseModel):
    """Two-class metrics computed from one confusion matrix. NaN marks an undefined value."""

    levels: list[Any] = Field(..., description="Label alphabet, in matrix order.")
    positive: Any = Field(..., description="Level treated as the event.")
    negative: Any = Field(..., description="Level treated as the non-event.")
    confusion_matrix: list[list[int]] = Field(
        ...,
        description="Counts with predictions as rows and truth as columns.",
    )
    n: int = Field(..., description="Number of tabulated observations.")

    prevalence: float
    prevalence_source: PrevalenceSource

    sensitivity: float
    specificity: float
    ppv: float
    npv: float
