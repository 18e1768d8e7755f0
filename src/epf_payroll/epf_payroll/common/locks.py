from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLocks:
    """One re-entrant lock per natural key, e.g. ("salary", employee_id, period).

    Serializes the existence check and insert for a key inside this process;
    the database unique keys cover concurrent processes.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield


def salary_key(employee_id: str, period: str) -> tuple:
    return ("salary", str(employee_id), period)


def company_period_key(company_id: str, period: str) -> tuple:
    return ("company-period", str(company_id), period)
