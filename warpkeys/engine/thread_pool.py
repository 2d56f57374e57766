"""Thread pool abstraction giving every source its own worker."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Callable, Iterable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ThreadPoolManager:
    """Fan a callable out over items, one thread per item, and wait for all of them."""

    def __init__(self, thread_name_prefix: str = "warpkeys") -> None:
        self.thread_name_prefix = thread_name_prefix
        self._executors: list[ThreadPoolExecutor] = []
        self._lock = Lock()

    def fan_out(self, func: Callable[[T], R], items: Iterable[T]) -> list[Future[R]]:
        """Submit ``func(item)`` for every item at once; nothing waits on a sibling."""

        batch: Sequence[T] = list(items)
        if not batch:
            return []
        executor = ThreadPoolExecutor(
            max_workers=len(batch), thread_name_prefix=self.thread_name_prefix
        )
        with self._lock:
            self._executors.append(executor)
        return [executor.submit(func, item) for item in batch]

    @staticmethod
    def wait_all(futures: Sequence[Future[R]]) -> None:
        """Block until every future has finished, successfully or not."""

        if futures:
            wait(futures)

    def shutdown(self) -> None:
        with self._lock:
            for executor in self._executors:
                executor.shutdown(wait=True)
            self._executors.clear()


__all__ = ["ThreadPoolManager"]
