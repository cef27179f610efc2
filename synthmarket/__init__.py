"""Synthetic OHLCV time-series engine."""

__version__ = "0.1.0"
