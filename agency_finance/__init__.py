"""Financial aggregation engine for agency operations."""

__version__ = "1.0.0"
