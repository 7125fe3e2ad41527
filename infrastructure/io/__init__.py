"""I/O utilities: filesystem operations and dataset loading."""

from infrastructure.io.datasets import read_observations
from infrastructure.io.fs import ensure_exists, make_run_dir

__all__ = [
    "ensure_exists",
    "make_run_dir",
    "read_observations",
]
