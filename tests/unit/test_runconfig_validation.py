from pathlib import Path

import pytest
from pydantic import ValidationError

from infrastructure.config.models import DataColumnsConfig, MetricsConfig, NaPolicy, RunConfig


def _columns() -> DataColumnsConfig:
    return DataColumnsConfig(truth_col="truth", estimate_col="estimate")


def test_defaults_follow_event_first_and_strip() -> None:
    cfg = RunConfig(data_file_path=Path("dataset/predictions.csv"), columns=_columns())

    assert cfg.metrics.event_first is True
    assert cfg.metrics.na_policy is NaPolicy.STRIP
    assert cfg.levels is None
    assert cfg.prevalence is None


def test_na_policy_parses_from_string() -> None:
    assert MetricsConfig(na_policy="fail").na_policy is NaPolicy.FAIL


def test_metrics_config_is_read_only() -> None:
    cfg = MetricsConfig()
    with pytest.raises(ValidationError):
        cfg.event_first = False


def test_positive_must_be_one_of_levels() -> None:
    with pytest.raises(ValidationError, match="not one of levels"):
        RunConfig(
            data_file_path=Path("dataset/predictions.csv"),
            columns=_columns(),
            levels=["Yes", "No"],
            positive="Maybe",
        )


@pytest.mark.parametrize("levels", [["Yes", "Yes"], ["Yes"], ["a", "b", "c"]])
def test_levels_must_be_two_distinct_labels(levels) -> None:
    with pytest.raises(ValidationError):
        RunConfig(data_file_path=Path("dataset/predictions.csv"), columns=_columns(), levels=levels)


def test_truth_and_estimate_columns_must_differ() -> None:
    with pytest.raises(ValidationError, match="must differ"):
        RunConfig(
            data_file_path=Path("dataset/predictions.csv"),
            columns=DataColumnsConfig(truth_col="label", estimate_col="label"),
        )


def test_positive_and_negative_must_differ() -> None:
    with pytest.raises(ValidationError):
        RunConfig(
            data_file_path=Path("dataset/predictions.csv"),
            columns=_columns(),
            positive="Yes",
            negative="Yes",
        )


@pytest.mark.parametrize("prevalence", [0, 1, 1.2, -0.1])
def test_prevalence_is_an_open_unit_interval(prevalence) -> None:
    with pytest.raises(ValidationError):
        RunConfig(data_file_path=Path("dataset/predictions.csv"), columns=_columns(), prevalence=prevalence)
