"""
Configuration management: models, loading, and validation.

Handles:
- MetricsConfig: event_first convention and missing-label policy
- RunConfig: CLI run configuration (data file, columns, levels)
- YAML loading and environment variable overrides

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import load_metrics_config, load_run_config
from infrastructure.config.models import (
    # Column mapping
    DataColumnsConfig,
    # Evaluator settings
    MetricsConfig,
    # Enums
    NaPolicy,
    # Main config
    RunConfig,
)

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    # Evaluator settings
    "MetricsConfig",
    "load_metrics_config",
    # Enums
    "NaPolicy",
    # Data columns
    "DataColumnsConfig",
]
