"""Dataset loading utilities."""

from collections.abc import Sequence
from pathlib import Path

import pandas as pd


def read_observations(path: Path, columns: Sequence[str]) -> pd.DataFrame:
    """
    Read the label columns of a tabular data file (Excel or CSV).

    Labels are read as strings so that "1" in the truth column and 1 in the
    estimate column land on the same level. Empty cells stay missing (NaN).

    Supported formats:
    - Excel: .xlsx, .xls
    - CSV: .csv

    Args:
        path: Path to data file
        columns: Columns to keep, in order

    Returns:
        pandas DataFrame with only the requested columns

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
        KeyError: If a requested column is missing
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in [".xlsx", ".xls"]:
        df = pd.read_excel(path, dtype=str)
    elif suffix == ".csv":
        df = pd.read_csv(path, dtype=str)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .xlsx, .xls, .csv")

    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise KeyError(f"Required columns {missing} not found in {path}. Available: {list(df.columns)}")

    out = df[list(columns)].copy()
    for col in out.columns:
        # Blank cells count as missing
        out[col] = out[col].str.strip().mask(lambda s: s == "")
    return out
