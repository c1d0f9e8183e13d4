"""Series definitions for the Binance Futures datasets.

Each series is plain configuration bound to one generic set of operations:
endpoint parameters for a query window, raw-to-canonical record mapping with
fixed decimal precision, and the timestamp to start from when no data exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .api import QueryWindow, compute_query_window
from .errors import AdapterError
from .formatting import decimal_to_text, format_number


DEFAULT_SYMBOL = "BTCUSDT"
DEFAULT_LOOKBACK_DAYS = 30

# Binance Futures launch; the funding rate history starts here
FUNDING_RATE_GENESIS_MS = 1568102400000

Fetch = Callable[[str, Mapping[str, Any]], List[Dict[str, Any]]]


@dataclass(frozen=True)
class Record:
    timestamp: int
    values: Tuple[Tuple[str, Decimal], ...]

    def columns(self) -> List[str]:
        return ["timestamp"] + [name for name, _ in self.values]

    def to_line(self) -> str:
        return ",".join([str(self.timestamp)] + [decimal_to_text(v) for _, v in self.values])


@dataclass(frozen=True)
class Field:
    name: str
    raw_key: str
    decimal_places: int
    round_up: bool = True


@dataclass(frozen=True)
class SeriesDefinition:
    name: str
    filename: str
    path: str
    timestamp_key: str
    fields: Tuple[Field, ...]
    limit: int
    period: Optional[str] = None
    window_days: int = 1
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    genesis_timestamp: Optional[int] = None
    interval_ms: Optional[int] = None

    def endpoint(self, window: QueryWindow, symbol: str = DEFAULT_SYMBOL) -> Tuple[str, Dict[str, Any]]:
        params: Dict[str, Any] = {"symbol": symbol}
        if self.period:
            params["period"] = self.period
        params["limit"] = self.limit
        params["startTime"] = window.start
        params["endTime"] = window.end
        return self.path, params

    def map_record(self, raw: Mapping[str, Any]) -> Record:
        if not isinstance(raw, Mapping):
            raise AdapterError(f"{self.name}: expected a JSON object per record, got {type(raw).__name__}")
        try:
            ts = int(raw[self.timestamp_key])
        except KeyError as e:
            raise AdapterError(f"{self.name}: record missing '{self.timestamp_key}': {dict(raw)}") from e
        except (TypeError, ValueError) as e:
            raise AdapterError(f"{self.name}: bad timestamp {raw[self.timestamp_key]!r}") from e

        values = []
        for f in self.fields:
            if f.raw_key not in raw:
                raise AdapterError(f"{self.name}: record at {ts} missing '{f.raw_key}'")
            try:
                values.append((f.name, format_number(raw[f.raw_key], f.decimal_places, f.round_up)))
            except ValueError as e:
                raise AdapterError(f"{self.name}: record at {ts} has bad '{f.raw_key}': {e}") from e
        return Record(timestamp=ts, values=tuple(values))

    def map_records(self, raws: Iterable[Mapping[str, Any]]) -> List[Record]:
        records = [self.map_record(r) for r in raws]
        # Stable sort, Binance already returns ascending pages
        return sorted(records, key=lambda r: r.timestamp)

    def genesis(self, now: Optional[datetime] = None) -> int:
        """Timestamp (ms) to resume from when the dataset holds no records."""
        if self.genesis_timestamp is not None:
            return self.genesis_timestamp
        now = now or datetime.now(timezone.utc)
        return int((now - timedelta(days=self.lookback_days)).timestamp() * 1000)

    def next_records(self, resume_timestamp: int, fetch: Fetch, symbol: str = DEFAULT_SYMBOL) -> List[Record]:
        window = compute_query_window(resume_timestamp, self.window_days)
        path, params = self.endpoint(window, symbol)
        return self.map_records(fetch(path, params))


FUNDING_RATE = SeriesDefinition(
    name="funding_rate",
    filename="funding_rate.csv",
    path="/fapi/v1/fundingRate",
    timestamp_key="fundingTime",
    fields=(Field("funding_rate", "fundingRate", 8),),
    limit=1000,
    # One event every ~8h, so a wide window still fits in a single page
    window_days=200,
    genesis_timestamp=FUNDING_RATE_GENESIS_MS,
)

OPEN_INTEREST = SeriesDefinition(
    name="open_interest",
    filename="open_interest.csv",
    path="/futures/data/openInterestHist",
    timestamp_key="timestamp",
    fields=(
        Field("sum_open_interest", "sumOpenInterest", 8),
        Field("sum_open_interest_value", "sumOpenInterestValue", 8),
    ),
    limit=500,
    period="5m",
    interval_ms=300_000,
)

LONG_SHORT_RATIO = SeriesDefinition(
    name="long_short_ratio",
    filename="long_short_ratio.csv",
    path="/futures/data/globalLongShortAccountRatio",
    timestamp_key="timestamp",
    fields=(
        Field("long_account", "longAccount", 4),
        Field("short_account", "shortAccount", 4),
        Field("long_short_ratio", "longShortRatio", 4),
    ),
    limit=500,
    period="5m",
    interval_ms=300_000,
)

TAKER_BUY_SELL_VOLUME = SeriesDefinition(
    name="taker_buy_sell_volume",
    filename="taker_buy_sell_volume.csv",
    path="/futures/data/takerlongshortRatio",
    timestamp_key="timestamp",
    fields=(
        Field("buy_vol", "buyVol", 4),
        Field("sell_vol", "sellVol", 4),
        Field("buy_sell_ratio", "buySellRatio", 4),
    ),
    limit=500,
    period="5m",
    interval_ms=300_000,
)

# Run order
SERIES: Dict[str, SeriesDefinition] = {
    s.name: s for s in (FUNDING_RATE, OPEN_INTEREST, LONG_SHORT_RATIO, TAKER_BUY_SELL_VOLUME)
}
