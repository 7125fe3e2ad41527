"""Configuration models (Pydantic classes)."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from infrastructure.constants import DATA_DIR, OUTPUT_ROOT


class NaPolicy(str, Enum):
    """How missing labels are handled before tabulation."""

    STRIP = "strip"
    FAIL = "fail"


class MetricsConfig(BaseModel):
    """
    Settings read by the metric evaluator.

    event_first decides which level of a two-level alphabet is the positive
    ("event") class when a call does not name one explicitly.
    """

    model_config = ConfigDict(frozen=True)

    event_first: bool = True
    na_policy: NaPolicy = NaPolicy.STRIP


class DataColumnsConfig(BaseModel):
    """Column name mapping for the observations dataset."""

    truth_col: str
    estimate_col: str


class RunConfig(BaseModel):
    """
    Runtime configuration for a CLI evaluation run.
    - Loaded from metrics.yaml
    - Resolved by the configuration loader (paths, environment overrides)
    - Consumed by the evaluation workflow
    """

    data_file_path: Path = Field(..., description="Path to the observations file (Excel or CSV).")
    data_dir: Path = Field(default_factory=lambda: DATA_DIR)
    columns: DataColumnsConfig

    levels: list[str] | None = Field(
        default=None,
        description="Label alphabet in order. If missing, levels are derived from the data.",
    )
    positive: str | None = Field(default=None, description="Explicit positive (event) label.")
    negative: str | None = Field(default=None, description="Explicit negative (non-event) label.")
    prevalence: float | None = Field(
        default=None,
        gt=0,
        lt=1,
        description="Assumed prevalence for PPV/NPV. If missing, it is estimated from the data.",
    )

    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    output_root: Path = Field(default_factory=lambda: OUTPUT_ROOT)

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        if self.columns.truth_col == self.columns.estimate_col:
            raise ValueError("columns.truth_col and columns.estimate_col must differ")

        if self.levels is not None:
            if len(set(self.levels)) != len(self.levels):
                raise ValueError(f"levels must be unique, got {self.levels}")
            if len(self.levels) != 2:
                raise ValueError(f"levels must name exactly two classes, got {self.levels}")
            for name in ("positive", "negative"):
                value = getattr(self, name)
                if value is not None and value not in self.levels:
                    raise ValueError(f"{name}={value!r} is not one of levels {self.levels}")

        if self.positive is not None and self.positive == self.negative:
            raise ValueError("positive and negative must be different labels")

        return self
