"""Configuration loading from YAML files."""

import os
from pathlib import Path
from typing import Any

import yaml

from infrastructure.config.models import DataColumnsConfig, MetricsConfig, RunConfig
from infrastructure.constants import DATA_DIR, EVENT_FIRST_ENV_VAR, OUTPUT_ROOT

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def _env_bool(name: str) -> bool | None:
    """Read a boolean environment variable; None when unset or blank."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    value = raw.strip().lower()
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, got {raw!r}")


def _as_label(value: Any) -> str | None:
    # Observations are read as strings, so labels from YAML are compared as strings too
    return None if value is None else str(value)


def load_metrics_config(data: dict[str, Any] | None = None) -> MetricsConfig:
    """
    Build MetricsConfig from the `metrics` block of metrics.yaml.

    The METRICS_EVENT_FIRST environment variable, when set, overrides
    `event_first` for the whole session.
    """
    merged = dict(data or {})
    override = _env_bool(EVENT_FIRST_ENV_VAR)
    if override is not None:
        merged["event_first"] = override
    return MetricsConfig(**merged)


def load_run_config(config_path: Path) -> RunConfig:
    """
    Load metrics.yaml and construct a fully-resolved RunConfig.

    Required keys: data_file, truth_col, estimate_col.
    `data_file` is resolved relative to `data_dir` (default: dataset/).
    """
    exp = _load_yaml(config_path)

    for key in ("data_file", "truth_col", "estimate_col"):
        if not exp.get(key):
            raise ValueError(f"metrics.yaml missing required key: {key}")

    metrics_block = exp.get("metrics") or {}
    if not isinstance(metrics_block, dict):
        raise ValueError(f"'metrics' must be a mapping in {config_path}")

    data_dir = Path(exp.get("data_dir", str(DATA_DIR)))
    levels_raw = exp.get("levels")
    if levels_raw is not None and not isinstance(levels_raw, list):
        raise ValueError(f"'levels' must be a list in {config_path}")

    cfg = RunConfig(
        data_dir=data_dir,
        data_file_path=data_dir / str(exp["data_file"]),
        columns=DataColumnsConfig(
            truth_col=str(exp["truth_col"]),
            estimate_col=str(exp["estimate_col"]),
        ),
        levels=[str(v) for v in levels_raw] if levels_raw is not None else None,
        positive=_as_label(exp.get("positive")),
        negative=_as_label(exp.get("negative")),
        prevalence=exp.get("prevalence"),
        metrics=load_metrics_config(metrics_block),
        output_root=Path(exp.get("output_root", str(OUTPUT_ROOT))),
    )

    return cfg
