#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path

import pandas as pd

from futures_dataset.binance.validation import load_dataset, validate_dataset


def _df(timestamps, base=0.5):
    return pd.DataFrame([{"timestamp": t, "v": base + i} for i, t in enumerate(timestamps)])


def test_valid_dataset_counts_gaps():
    df = _df([300_000, 600_000, 900_000, 1_500_000])
    res = validate_dataset(df, expected_interval_ms=300_000)
    assert res.ok and res.validated_rows == 4
    assert res.gaps == 1


def test_duplicates_and_disorder_fail():
    assert not validate_dataset(_df([1, 2, 2, 3])).ok
    res = validate_dataset(_df([1, 3, 2]))
    assert not res.ok and "order" in res.reason


def test_missing_values_and_columns_fail():
    df = _df([1, 2, 3])
    df.loc[1, "v"] = None
    assert not validate_dataset(df).ok
    assert not validate_dataset(pd.DataFrame({"time": [1, 2]})).ok


def test_load_dataset(tmp_path: Path):
    empty = tmp_path / "empty.csv"
    empty.write_text("")
    assert load_dataset(empty).empty
    assert validate_dataset(load_dataset(empty)).ok

    path = tmp_path / "funding_rate.csv"
    path.write_text("timestamp,funding_rate\n1568102400000,0.0001\n1568131200000,-0.00003")
    df = load_dataset(path)
    assert list(df.columns) == ["timestamp", "funding_rate"]
    assert df["timestamp"].tolist() == [1568102400000, 1568131200000]
    assert validate_dataset(df).ok
