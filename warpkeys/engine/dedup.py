"""Deduplication of harvested keys."""

from __future__ import annotations

from typing import Iterable


def dedupe(keys: Iterable[str]) -> set[str]:
    """Collapse keys into a set; exact string equality is identity."""

    return set(keys)


__all__ = ["dedupe"]
