from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import List, Optional

from .api import REQUEST_TIMEOUT, fetch_records
from .engine import sync_all
from .errors import DatasetError
from .series import DEFAULT_SYMBOL, SERIES
from .throttle import DEFAULT_DELAY_SECONDS, throttled
from .validation import load_dataset, validate_dataset


DEFAULT_OUTPUT_DIR = Path("./output")


@dataclass
class RunConfig:
    output_dir: Path = DEFAULT_OUTPUT_DIR
    series: List[str] = field(default_factory=lambda: list(SERIES))
    symbol: str = DEFAULT_SYMBOL
    delay: float = DEFAULT_DELAY_SECONDS
    timeout: float = REQUEST_TIMEOUT
    validate: bool = False
    continue_on_error: bool = False
    debug: bool = False


def run_once(cfg: RunConfig) -> int:
    print("BINANCE FUTURES DATASET BUILDER")
    definitions = [SERIES[name] for name in cfg.series]
    fetch = throttled(partial(fetch_records, timeout=cfg.timeout), delay=cfg.delay)

    try:
        report = sync_all(
            definitions,
            fetch,
            cfg.output_dir,
            symbol=cfg.symbol,
            continue_on_error=cfg.continue_on_error,
            debug=cfg.debug,
        )
    except DatasetError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        if cfg.debug:
            raise
        return 1

    if cfg.validate:
        invalid = 0
        for result in report.results:
            v = validate_dataset(load_dataset(result.path), SERIES[result.series].interval_ms)
            if v.ok:
                print(f"[INFO] {result.series}: {v.reason} rows={v.validated_rows} gaps={v.gaps}")
            else:
                print(f"[ERROR] {result.series}: validation failed: {v.reason}", file=sys.stderr)
                invalid += 1
        if invalid:
            return 2

    if not report.ok:
        failed = ", ".join(name for name, _ in report.failures)
        print(f"[ERROR] {len(report.failures)} series failed: {failed}", file=sys.stderr)
        return 1

    print("[INFO] The datasets have been synced successfully")
    return 0


def parse_args(argv: Optional[list[str]] = None) -> RunConfig:
    p = argparse.ArgumentParser(description="Incrementally sync Binance Futures market-data datasets to CSV")
    p.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR, help="Directory holding the dataset CSVs")
    p.add_argument(
        "--series",
        action="append",
        choices=list(SERIES),
        default=None,
        help="Series to sync (repeatable); default: all, in order",
    )
    p.add_argument("--symbol", default=DEFAULT_SYMBOL, help="Trading pair symbol")
    p.add_argument("--delay", type=float, default=DEFAULT_DELAY_SECONDS, help="Seconds to wait before and after each request")
    p.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT, help="Network timeout per request in seconds")
    p.add_argument("--validate", action="store_true", help="Check timestamp ordering of each dataset after syncing")
    p.add_argument("--continue-on-error", action="store_true", help="Keep syncing the remaining series after a failure")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    args = p.parse_args(argv)

    return RunConfig(
        output_dir=args.output_dir,
        series=args.series or list(SERIES),
        symbol=args.symbol,
        delay=float(args.delay),
        timeout=float(args.timeout),
        validate=bool(args.validate),
        continue_on_error=bool(args.continue_on_error),
        debug=bool(args.debug),
    )


def main(argv: Optional[list[str]] = None) -> int:
    cfg = parse_args(argv)
    try:
        return run_once(cfg)
    except Exception as e:  # surface clear error message
        print(f"[ERROR] {e}", file=sys.stderr)
        if cfg.debug:
            raise
        return 3


if __name__ == "__main__":
    raise SystemExit(main())
