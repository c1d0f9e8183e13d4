from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen
import http.client
import json

from .errors import UpstreamError


BINANCE_FAPI = "https://fapi.binance.com"
USER_AGENT = "futures-dataset/1.0"

# Correctness over latency: Binance's data endpoints can be slow on wide windows
REQUEST_TIMEOUT = 180.0

DAY_MS = 86_400_000


@dataclass(frozen=True)
class Response:
    status_code: int
    data: Any


@dataclass(frozen=True)
class QueryWindow:
    start: int
    end: int


def compute_query_window(resume_timestamp: int, window_days: int = 1) -> QueryWindow:
    """Window of history to request after the last persisted record.

    start is always strictly after resume_timestamp so the boundary record is
    never requested again.
    """
    start = int(resume_timestamp) + 1
    return QueryWindow(start=start, end=start + int(window_days) * DAY_MS)


def build_url(path: str, params: Mapping[str, Any]) -> str:
    qs = urlencode(dict(params))
    return f"{BINANCE_FAPI}{path}?{qs}" if qs else f"{BINANCE_FAPI}{path}"


def _decode_body(raw: bytes) -> Any:
    if not raw:
        return None
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


def http_get(path: str, params: Mapping[str, Any], timeout: float = REQUEST_TIMEOUT) -> Response:
    """Issue a single GET against the futures API.

    Non-2xx responses are returned with their status code rather than raised;
    the caller decides what a bad status means.
    """
    url = build_url(path, params)
    req = Request(url, headers={"User-Agent": USER_AGENT, "Content-Type": "application/json"})
    try:
        with urlopen(req, timeout=timeout) as resp:
            return Response(status_code=int(resp.status), data=_decode_body(resp.read()))
    except HTTPError as e:
        try:
            body = e.read() or b""
        except (OSError, http.client.HTTPException) as read_err:
            raise UpstreamError(f"GET {path} returned HTTP {e.code}, body unreadable: {read_err}") from read_err
        return Response(status_code=int(e.code), data=_decode_body(body))
    except (OSError, http.client.HTTPException) as e:
        # URLError, timeouts, resets and truncated bodies raised while reading
        raise UpstreamError(f"GET {path} failed: {e!r}") from e


def check_response(path: str, response: Response, expect_array: bool = True) -> None:
    if response.status_code != 200:
        raise UpstreamError(
            f"GET {path} returned HTTP {response.status_code} (expected 200): {str(response.data)[:200]}"
        )
    if expect_array and not isinstance(response.data, list):
        raise UpstreamError(
            f"GET {path} returned an invalid series of records: {type(response.data).__name__}"
        )


def fetch_records(
    path: str,
    params: Mapping[str, Any],
    timeout: Optional[float] = None,
) -> List[Dict[str, Any]]:
    """Fetch a page of raw records from a futures data endpoint.

    Raises UpstreamError when the status is not 200 or the body is not a JSON array.
    """
    response = http_get(path, params, timeout=REQUEST_TIMEOUT if timeout is None else timeout)
    check_response(path, response)
    return list(response.data)
