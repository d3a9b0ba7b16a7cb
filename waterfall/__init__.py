"""Render time-series latency histograms as annotated waterfall PNGs."""

__version__ = '1.0'
