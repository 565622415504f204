from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


class EmployeeLockRegistry:
    """One lock per employee id.

    Serializes the read-history / validate / persist sequence of a single
    employee, so two near-simultaneous submissions cannot both pass the
    same-type and daily-cap checks. Different employees never contend.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, employee_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(employee_id)
            if lock is None:
                lock = self._locks[employee_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, employee_id: str, *, timeout: Optional[float] = None) -> Iterator[None]:
        lock = self._lock_for(employee_id)
        acquired = lock.acquire(timeout=timeout if timeout is not None else -1)
        if not acquired:
            raise TimeoutError(f"Timed out waiting for submissions of employee {employee_id}")
        try:
            yield
        finally:
            lock.release()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
