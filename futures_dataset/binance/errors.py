from __future__ import annotations


class DatasetError(RuntimeError):
    """Base error for dataset syncing failures."""


class UpstreamError(DatasetError):
    """Binance returned a bad status code, a malformed body, or could not be reached."""


class StorageError(DatasetError):
    """A dataset file or its directory could not be read, parsed or written."""


class AdapterError(DatasetError):
    """A raw record did not have the shape a series expects."""
