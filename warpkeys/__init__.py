"""Concurrent WARP+ key harvester."""

__version__ = "0.1.0"
