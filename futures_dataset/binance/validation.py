from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str
    validated_rows: int
    gaps: int = 0


def load_dataset(path: Path) -> pd.DataFrame:
    """Read a dataset CSV; an empty file gives an empty frame."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"dataset not found: {path}")
    if path.stat().st_size == 0:
        return pd.DataFrame()
    try:
        return pd.read_csv(path)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()


def count_gaps(timestamps: pd.Series, expected_interval_ms: int) -> int:
    diffs = np.diff(timestamps.to_numpy(dtype="int64"))
    return int((diffs != expected_interval_ms).sum()) if diffs.size else 0


def validate_dataset(df: pd.DataFrame, expected_interval_ms: Optional[int] = None) -> ValidationResult:
    """Check a synced dataset's integrity.

    - Requires a timestamp column and no missing values.
    - Timestamps must be strictly increasing (so no duplicates either).
    - With expected_interval_ms, spacing gaps are counted but do not fail the
      check; Binance has outages in its own history.
    """
    if df.empty:
        return ValidationResult(True, "empty dataset", 0)
    if "timestamp" not in df.columns:
        return ValidationResult(False, "missing timestamp column", 0)

    nan_cols = [c for c in df.columns if df[c].isna().any()]
    if nan_cols:
        return ValidationResult(False, f"NaN in columns {nan_cols}", 0)

    ts = df["timestamp"]
    dup_cnt = int(ts.duplicated().sum())
    if dup_cnt:
        return ValidationResult(False, f"duplicate timestamps: {dup_cnt}", 0)
    if not ts.is_monotonic_increasing:
        return ValidationResult(False, "timestamps not in increasing order", 0)

    gaps = count_gaps(ts, expected_interval_ms) if expected_interval_ms else 0
    return ValidationResult(True, "validated", len(df), gaps)
