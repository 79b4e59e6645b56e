"""Counting semaphore built on a condition variable."""

from __future__ import annotations

import threading


class Semaphore:
    """Blocks ``acquire`` while no permit is available."""

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"semaphore count must not be negative: {count}")
        self._count = count
        self._condition = threading.Condition()

    def acquire(self) -> None:
        with self._condition:
            self._condition.wait_for(lambda: self._count > 0)
            self._count -= 1

    def release(self) -> None:
        with self._condition:
            self._count += 1
            self._condition.notify()

    def __enter__(self) -> "Semaphore":
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()