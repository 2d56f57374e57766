"""Scheduling helpers."""

from .apsched_adapter import APSchedulerAdapter, HARVEST_JOB_ID

__all__ = ["APSchedulerAdapter", "HARVEST_JOB_ID"]
