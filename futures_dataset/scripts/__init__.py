"""CLI scripts for working with synced datasets.

Scripts:
- inspect_dataset: Report rows, range, duplicates and gaps of a dataset CSV

Usage:
    python -m futures_dataset.scripts.inspect_dataset --help
"""

__all__ = [
    "inspect_dataset",
]
