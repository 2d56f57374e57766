"""Derive the capped full and shuffled lite artifacts from unique keys."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import AbstractSet

FULL_LIMIT = 100
LITE_LIMIT = 15


@dataclass(slots=True)
class SampleResult:
    full: list[str] = field(default_factory=list)
    lite: list[str] = field(default_factory=list)


class Sampler:
    """Select up to ``full_limit`` keys as-is and up to ``lite_limit`` shuffled keys.

    The full artifact follows the set's iteration order, which is arbitrary
    and may change between runs. The lite artifact is taken from a shuffled
    copy; pass ``rng`` (or ``seed``) for a reproducible shuffle, otherwise the
    generator is seeded from the current time.
    """

    def __init__(
        self,
        full_limit: int = FULL_LIMIT,
        lite_limit: int = LITE_LIMIT,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        if full_limit < 0 or lite_limit < 0:
            raise ValueError("limits must be >= 0")
        self.full_limit = full_limit
        self.lite_limit = lite_limit
        if rng is None:
            rng = random.Random(time.time_ns() if seed is None else seed)
        self.rng = rng

    def sample(self, unique: AbstractSet[str]) -> SampleResult:
        ordered = list(unique)
        if not ordered:
            return SampleResult()
        full = ordered[: min(len(ordered), self.full_limit)]
        shuffled = list(ordered)
        self.rng.shuffle(shuffled)
        lite = shuffled[: min(len(shuffled), self.lite_limit)]
        return SampleResult(full=full, lite=lite)


__all__ = ["FULL_LIMIT", "LITE_LIMIT", "SampleResult", "Sampler"]
