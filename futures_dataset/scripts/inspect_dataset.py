#!/usr/bin/env python3
from __future__ import annotations

"""
Inspect a synced Binance Futures dataset CSV.

Reports rows, UTC time range, duplicate timestamps, spacing gaps and the
integrity verdict used by `futures-dataset --validate`.

Usage example:
  python -m futures_dataset.scripts.inspect_dataset \
    --csv output/open_interest.csv --series open_interest
"""

import argparse
from pathlib import Path
from typing import Optional

import pandas as pd

from futures_dataset.binance.series import SERIES
from futures_dataset.binance.validation import count_gaps, load_dataset, validate_dataset


def inspect_dataframe(df: pd.DataFrame, expected_interval_ms: Optional[int] = None) -> None:
    print(f"[INSPECT] rows={len(df):,}")
    if df.empty:
        return
    if "timestamp" not in df.columns:
        print("[WARN] 'timestamp' column missing; unexpected format")
        return
    ts = pd.to_datetime(df["timestamp"], unit="ms", utc=True).dt.tz_localize(None)
    print(f"[INSPECT] ts_range: {ts.iloc[0]} .. {ts.iloc[-1]}")
    dup_cnt = int(df["timestamp"].duplicated().sum())
    if dup_cnt:
        print(f"[INSPECT] duplicate timestamps: {dup_cnt}")
    if expected_interval_ms:
        gaps = count_gaps(df["timestamp"], expected_interval_ms)
        print(f"[INSPECT] continuous={gaps == 0} gaps={gaps} (interval={expected_interval_ms}ms)")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Inspect a Binance Futures dataset CSV")
    p.add_argument("--csv", type=Path, required=True, help="Path to dataset CSV")
    p.add_argument("--series", choices=list(SERIES), default=None, help="Series the file holds (sets the expected interval)")
    p.add_argument("--interval-ms", type=int, default=None, help="Expected spacing between records in ms")
    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    interval = args.interval_ms
    if interval is None and args.series:
        interval = SERIES[args.series].interval_ms

    try:
        df = load_dataset(args.csv)
    except FileNotFoundError as e:
        print(f"[ERROR] {e}")
        return 2

    inspect_dataframe(df, interval)
    v = validate_dataset(df, interval)
    if not v.ok:
        print(f"[ERROR] invalid dataset: {v.reason}")
        return 2
    print(f"[INFO] {v.reason} rows={v.validated_rows} gaps={v.gaps}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
