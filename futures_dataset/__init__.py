"""Futures Dataset - Incremental Binance Futures market-data datasets.

Provides:
- Resumable sync of funding rate, open interest, long/short ratio and
  taker buy/sell volume into flat CSV files
- Dataset inspection script
"""

__version__ = "0.1.0"

# Expose main submodules
from . import binance
from . import scripts

__all__ = ["binance", "scripts", "__version__"]
