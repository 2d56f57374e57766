"""Bounded fan-in channel shared by fetch workers."""

from __future__ import annotations

import queue


class ResultCollector:
    """Queue sized to the number of producers; each producer puts at most once.

    Workers call :meth:`put` only after a successful fetch. The coordinator is
    the sole reader and calls :meth:`drain` once every worker has finished.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._queue: queue.Queue[list[str]] = queue.Queue(maxsize=capacity)

    def put(self, keys: list[str]) -> None:
        # Never blocks: capacity equals the number of producers.
        self._queue.put_nowait(list(keys))

    def drain(self) -> list[str]:
        merged: list[str] = []
        while True:
            try:
                batch = self._queue.get_nowait()
            except queue.Empty:
                return merged
            merged.extend(batch)

    def __len__(self) -> int:
        return self._queue.qsize()


__all__ = ["ResultCollector"]
