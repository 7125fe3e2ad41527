"""Filesystem utility functions."""

from pathlib import Path


def ensure_exists(path: Path, what: str) -> None:
    """
    Check that a path exists, raise FileNotFoundError if not.

    Args:
        path: Path to check
        what: Description of what this path represents (for error message)

    Raises:
        FileNotFoundError: If path does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing {what} at: {path}")


def make_run_dir(output_root: Path, name: str) -> Path:
    """Create (if needed) and return output_root/name."""
    run_dir = output_root / name
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir
