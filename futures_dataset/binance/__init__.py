"""Binance USD-M Futures dataset builder.

Implements throttled data pulling, per-series record mapping, the flat CSV
record store and the resumable sync loop.
"""

__all__ = [
    "api",
    "engine",
    "errors",
    "formatting",
    "series",
    "store",
    "throttle",
    "validation",
]
