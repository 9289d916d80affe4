"""Fiscal-period billing aggregation and penalty engine for unit account statements."""

__version__ = "0.1.0"
