"""Readers for loading finance data into the engine."""

from agency_finance.readers.snapshot_reader import SnapshotReader

__all__ = ["SnapshotReader"]
