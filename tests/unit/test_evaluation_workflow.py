import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from application.evaluation import log_evaluation_summary, run_evaluation
from application.serialize import save_confusion_matrix, save_metrics
from domain.evaluation import ConfusionMatrix, build_confusion_matrix, compute_binary_metrics
from infrastructure.config.models import DataColumnsConfig, RunConfig
from infrastructure.io.datasets import read_observations

CSV_BODY = """id,truth,estimate
1,Yes,Yes
2,Yes,No
3,No,No
4,No,No
5,No,Yes
6,,Yes
7, No ,No
"""


def _write_csv(tmp_path: Path) -> Path:
    path = tmp_path / "predictions.csv"
    path.write_text(CSV_BODY, encoding="utf-8")
    return path


def _cfg(data_path: Path, **kwargs) -> RunConfig:
    return RunConfig(
        data_file_path=data_path,
        columns=DataColumnsConfig(truth_col="truth", estimate_col="estimate"),
        **kwargs,
    )


def test_read_observations_keeps_label_columns(tmp_path) -> None:
    df = read_observations(_write_csv(tmp_path), ["truth", "estimate"])

    assert list(df.columns) == ["truth", "estimate"]
    assert len(df) == 7
    assert pd.isna(df.loc[5, "truth"])
    assert df.loc[6, "truth"] == "No"


def test_read_observations_errors(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        read_observations(tmp_path / "missing.csv", ["truth"])

    with pytest.raises(KeyError, match="prediction"):
        read_observations(_write_csv(tmp_path), ["truth", "prediction"])

    other = tmp_path / "predictions.txt"
    other.write_text(CSV_BODY, encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported file format"):
        read_observations(other, ["truth", "estimate"])


def test_run_evaluation_on_csv(tmp_path, caplog) -> None:
    path = _write_csv(tmp_path)
    cfg = _cfg(path, levels=["Yes", "No"], positive="Yes")
    df = read_observations(path, ["truth", "estimate"])

    with caplog.at_level(logging.WARNING):
        metrics, cm_df = run_evaluation(cfg, df)

    assert metrics.n == 6
    assert metrics.levels == ["Yes", "No"]
    assert metrics.sensitivity == pytest.approx(0.5)
    assert metrics.specificity == pytest.approx(3 / 4)
    assert cm_df.loc["No", "No"] == 3
    assert "Ignored 1 rows" in caplog.text


def test_run_evaluation_uses_supplied_prevalence(tmp_path) -> None:
    path = _write_csv(tmp_path)
    cfg = _cfg(path, positive="Yes", prevalence=0.1)

    metrics, _ = run_evaluation(cfg, read_observations(path, ["truth", "estimate"]))

    assert metrics.prevalence_source == "supplied"
    assert metrics.prevalence == 0.1


def test_save_metrics_writes_undefined_as_null(tmp_path) -> None:
    # no actual negatives: specificity and NPV are undefined
    metrics, _ = compute_binary_metrics(ConfusionMatrix.from_counts([[1, 0], [0, 0]], levels=["Yes", "No"]))

    out = save_metrics(metrics, tmp_path / "out" / "metrics.json", run_context={"run_tag": "abc"})
    payload = json.loads(out.read_text(encoding="utf-8"))

    assert payload["sensitivity"] == 1.0
    assert payload["specificity"] is None
    assert payload["npv"] is None
    assert payload["confusion_matrix"] == [[1, 0], [0, 0]]
    assert payload["run"] == {"run_tag": "abc"}


def test_save_metrics_from_numpy_labels(tmp_path) -> None:
    cm = build_confusion_matrix(np.array([1, 0, 1]), np.array([1, 1, 0]))
    metrics, _ = compute_binary_metrics(cm, positive=np.int64(1))

    out = save_metrics(metrics, tmp_path / "metrics.json")
    payload = json.loads(out.read_text(encoding="utf-8"))

    assert payload["levels"] == [0, 1]
    assert payload["positive"] == 1
    assert payload["negative"] == 0
    assert payload["sensitivity"] == pytest.approx(0.5)


def test_save_confusion_matrix_round_trips(tmp_path) -> None:
    cm = ConfusionMatrix.from_counts([[5, 1], [2, 7]], levels=["pos", "neg"])

    out = save_confusion_matrix(cm.to_frame(), tmp_path / "cm.csv")
    back = pd.read_csv(out, index_col=0)

    assert list(back.index) == ["pos", "neg"]
    assert list(back.columns) == ["pos", "neg"]
    assert back.to_numpy().tolist() == [[5, 1], [2, 7]]


def test_log_evaluation_summary_marks_undefined_values(tmp_path, caplog) -> None:
    metrics, cm_df = compute_binary_metrics(ConfusionMatrix.from_counts([[1, 0], [0, 0]]))

    with caplog.at_level(logging.INFO):
        log_evaluation_summary(metrics, cm_df, tmp_path / "metrics.json", tmp_path / "cm.csv")

    assert "Specificity: undefined" in caplog.text
    assert "Sensitivity: 1.0000" in caplog.text
