from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import DatasetError
from .series import DEFAULT_SYMBOL, Fetch, SeriesDefinition
from .store import RecordStore


@dataclass(frozen=True)
class SyncResult:
    series: str
    path: Path
    cycles: int
    appended: int
    resume_timestamp: int


@dataclass
class SyncReport:
    results: List[SyncResult] = field(default_factory=list)
    failures: List[Tuple[str, DatasetError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def sync_series(
    definition: SeriesDefinition,
    fetch: Fetch,
    output_dir: Path,
    *,
    symbol: str = DEFAULT_SYMBOL,
    now: Optional[datetime] = None,
    debug: bool = False,
) -> SyncResult:
    """Bring one series' dataset file up to date.

    Repeats fetch -> append -> persist from the last stored timestamp until a
    page comes back with at most one record. Binance sometimes echoes the
    boundary record on an exhausted window, so a single record is treated as
    "no more data" rather than progress.

    Errors propagate; batches persisted before the failure stay on disk and the
    next run resumes after them.
    """
    store = RecordStore(Path(output_dir) / definition.filename)
    store.open_or_create()
    loaded = store.load(genesis=definition.genesis(now))
    resume = loaded.resume_timestamp
    text = loaded.text
    if debug:
        print(f"[DEBUG] {definition.name}: rows={loaded.rows} resume={resume} file={store.path}")

    cycles = 0
    appended = 0
    while True:
        records = definition.next_records(resume, fetch, symbol)
        cycles += 1
        if len(records) <= 1:
            break

        last = records[-1].timestamp
        text, added = store.append_batch(records, text)
        if added:
            store.write(text)
        appended += added
        if debug:
            print(f"[DEBUG] {definition.name}: cycle={cycles} received={len(records)} appended={added} last={last}")
        if last <= resume:
            # Page did not move past the resume point; stop rather than loop on it
            print(f"[WARN] {definition.name}: page ended at {last} <= resume {resume}; stopping", file=sys.stderr)
            break
        resume = last

    return SyncResult(
        series=definition.name,
        path=store.path,
        cycles=cycles,
        appended=appended,
        resume_timestamp=resume,
    )


def sync_all(
    definitions: Iterable[SeriesDefinition],
    fetch: Fetch,
    output_dir: Path,
    *,
    symbol: str = DEFAULT_SYMBOL,
    continue_on_error: bool = False,
    debug: bool = False,
) -> SyncReport:
    """Sync each series in order, one at a time.

    The first failure aborts the run unless continue_on_error is set, in which
    case it is recorded in the report and the next series is synced.
    """
    report = SyncReport()
    for definition in definitions:
        print(f"[INFO] {definition.name}: syncing...")
        try:
            result = sync_series(definition, fetch, output_dir, symbol=symbol, debug=debug)
        except DatasetError as e:
            if not continue_on_error:
                raise type(e)(f"{definition.name}: sync failed: {e}") from e
            print(f"[ERROR] {definition.name}: sync failed: {e}", file=sys.stderr)
            report.failures.append((definition.name, e))
            continue
        print(
            f"series={result.series} cycles={result.cycles} appended={result.appended} "
            f"resume={result.resume_timestamp} file={result.path}"
        )
        report.results.append(result)
    return report
