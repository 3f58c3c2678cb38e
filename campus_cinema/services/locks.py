import threading
from contextlib import contextmanager
from typing import Dict, Hashable


class _Entry:
    __slots__ = ("condition", "users", "readers", "writer")

    def __init__(self) -> None:
        self.condition = threading.Condition(threading.Lock())
        self.users = 0
        self.readers = 0
        self.writer = False


class KeyedLocks:
    """
    One mutex per key, created on first use and dropped when its last user
    releases it.

    Booking holds ("seat", schedule_id, seat_id) plus a shared hold on
    ("schedule", schedule_id); schedule writes hold ("hall", hall_id) and
    the schedule key exclusively. Unrelated seats and halls never wait on
    each other, and bookings for one showing only wait on writes to it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _acquire_entry(self, key: Hashable) -> _Entry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
            return entry

    def _release_entry(self, key: Hashable, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable):
        """Exclusive hold on ``key``."""
        entry = self._acquire_entry(key)
        try:
            with entry.condition:
                while entry.writer or entry.readers:
                    entry.condition.wait()
                entry.writer = True
            try:
                yield
            finally:
                with entry.condition:
                    entry.writer = False
                    entry.condition.notify_all()
        finally:
            self._release_entry(key, entry)

    @contextmanager
    def hold_shared(self, key: Hashable):
        """Shared hold on ``key``: any number at once, never alongside ``hold``."""
        entry = self._acquire_entry(key)
        try:
            with entry.condition:
                while entry.writer:
                    entry.condition.wait()
                entry.readers += 1
            try:
                yield
            finally:
                with entry.condition:
                    entry.readers -= 1
                    if not entry.readers:
                        entry.condition.notify_all()
        finally:
            self._release_entry(key, entry)


def seat_key(schedule_id, seat_id: str) -> tuple:
    return ("seat", schedule_id, seat_id)


def schedule_key(schedule_id) -> tuple:
    return ("schedule", schedule_id)


def hall_key(hall_id) -> tuple:
    return ("hall", hall_id)


def layout_key(hall_id) -> tuple:
    return ("layout", hall_id)
