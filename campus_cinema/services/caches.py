"""
Rebuildable lookup indexes over the database.

Each index is filled by a full scan at startup, answers lookups from
memory and falls back to the database on a miss. The database stays
authoritative: callers write there first and refresh the index afterwards
through ``update_quietly``, which logs instead of raising.

Entries are plain snapshots, never ORM instances, so they stay valid after
the session that produced them is closed.
"""
import bisect
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select

from campus_cinema.models.reservation import Reservation, CONFIRMED
from campus_cinema.models.schedule import MovieSchedule
from campus_cinema.models.student import Student

logger = logging.getLogger(__name__)

_MAX_UUID = UUID(int=(1 << 128) - 1)


@dataclass(frozen=True)
class StudentRecord:
    id: UUID
    full_name: str
    email: str
    student_number: str
    role: str
    is_active: bool

    @classmethod
    def from_model(cls, row: Student) -> "StudentRecord":
        return cls(
            id=row.id,
            full_name=row.full_name,
            email=row.email,
            student_number=row.student_number,
            role=row.role,
            is_active=bool(row.is_active),
        )


@dataclass(frozen=True)
class ScheduleRecord:
    id: UUID
    movie_id: UUID
    hall_id: UUID
    start_time: datetime
    end_time: datetime
    price: Decimal
    is_active: bool

    @classmethod
    def from_model(cls, row: MovieSchedule) -> "ScheduleRecord":
        return cls(
            id=row.id,
            movie_id=row.movie_id,
            hall_id=row.hall_id,
            start_time=row.start_time,
            end_time=row.end_time,
            price=row.price,
            is_active=bool(row.is_active),
        )


@dataclass(frozen=True)
class ReservationRecord:
    id: UUID
    student_id: UUID
    schedule_id: UUID
    seat_id: str
    price: Decimal
    status: str
    reservation_time: datetime
    cancelled_at: Optional[datetime] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == CONFIRMED

    @classmethod
    def from_model(cls, row: Reservation) -> "ReservationRecord":
        return cls(
            id=row.id,
            student_id=row.student_id,
            schedule_id=row.schedule_id,
            seat_id=row.seat_id,
            price=row.price,
            status=row.status,
            reservation_time=row.reservation_time,
            cancelled_at=row.cancelled_at,
        )


def update_quietly(action: Callable, *args) -> None:
    """Apply a cache mutation; failures are logged, never propagated."""
    try:
        action(*args)
    except Exception:
        logger.exception("Cache update %s failed; the database remains authoritative",
                         getattr(action, "__qualname__", action))


# ---------------------------------------------------------------------------
# Students by id / email
# ---------------------------------------------------------------------------


class StudentDirectory:
    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory
        self._by_id: Dict[UUID, StudentRecord] = {}
        self._by_email: Dict[str, UUID] = {}
        self._lock = threading.RLock()

    def load(self) -> int:
        with self._session_factory() as db:
            rows = db.scalars(select(Student)).all()
            records = [StudentRecord.from_model(r) for r in rows]
        with self._lock:
            self._by_id.clear()
            self._by_email.clear()
            for record in records:
                self.put(record)
        return len(records)

    def put(self, record: StudentRecord) -> None:
        with self._lock:
            previous = self._by_id.get(record.id)
            if previous is not None:
                self._by_email.pop(previous.email.lower(), None)
            self._by_id[record.id] = record
            self._by_email[record.email.lower()] = record.id

    def remove(self, student_id: UUID) -> None:
        with self._lock:
            record = self._by_id.pop(student_id, None)
            if record is not None:
                self._by_email.pop(record.email.lower(), None)

    def get(self, student_id: UUID) -> Optional[StudentRecord]:
        with self._lock:
            record = self._by_id.get(student_id)
        if record is not None:
            return record
        with self._session_factory() as db:
            row = db.get(Student, student_id)
            if row is None:
                return None
            record = StudentRecord.from_model(row)
        self.put(record)
        return record

    def get_by_email(self, email: str) -> Optional[StudentRecord]:
        with self._lock:
            student_id = self._by_email.get(email.lower())
            if student_id is not None:
                return self._by_id[student_id]
        with self._session_factory() as db:
            row = db.scalars(select(Student).where(Student.email == email)).first()
            if row is None:
                return None
            record = StudentRecord.from_model(row)
        self.put(record)
        return record

    def all(self) -> List[StudentRecord]:
        with self._lock:
            return sorted(self._by_id.values(), key=lambda r: r.full_name)


# ---------------------------------------------------------------------------
# Schedules ordered by start time
# ---------------------------------------------------------------------------


class ScheduleIndex:
    """Schedules by id, plus a sorted (start_time, hall_id, id) key list for range scans."""

    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory
        self._by_id: Dict[UUID, ScheduleRecord] = {}
        self._order: List[Tuple[datetime, UUID, UUID]] = []
        self._lock = threading.RLock()

    @staticmethod
    def _key(record: ScheduleRecord) -> Tuple[datetime, UUID, UUID]:
        return (record.start_time, record.hall_id, record.id)

    def load(self) -> int:
        with self._session_factory() as db:
            rows = db.scalars(select(MovieSchedule)).all()
            records = [ScheduleRecord.from_model(r) for r in rows]
        with self._lock:
            self._by_id = {r.id: r for r in records}
            self._order = sorted(self._key(r) for r in records)
        return len(records)

    def put(self, record: ScheduleRecord) -> None:
        with self._lock:
            self.remove(record.id)
            self._by_id[record.id] = record
            bisect.insort(self._order, self._key(record))

    def remove(self, schedule_id: UUID) -> None:
        with self._lock:
            record = self._by_id.pop(schedule_id, None)
            if record is None:
                return
            key = self._key(record)
            index = bisect.bisect_left(self._order, key)
            if index < len(self._order) and self._order[index] == key:
                del self._order[index]

    def get(self, schedule_id: UUID) -> Optional[ScheduleRecord]:
        with self._lock:
            record = self._by_id.get(schedule_id)
        if record is not None:
            return record
        with self._session_factory() as db:
            row = db.get(MovieSchedule, schedule_id)
            if row is None:
                return None
            record = ScheduleRecord.from_model(row)
        self.put(record)
        return record

    def all_in_order(self, active_only: bool = False) -> List[ScheduleRecord]:
        with self._lock:
            records = [self._by_id[key[2]] for key in self._order]
        if active_only:
            records = [r for r in records if r.is_active]
        return records

    def in_range(
        self, start: datetime, end: datetime, active_only: bool = False
    ) -> List[ScheduleRecord]:
        """Schedules starting within [start, end], by start time then hall id."""
        with self._lock:
            low = bisect.bisect_left(self._order, (start,))
            high = bisect.bisect_right(self._order, (end, _MAX_UUID, _MAX_UUID))
            records = [self._by_id[key[2]] for key in self._order[low:high]]
        if active_only:
            records = [r for r in records if r.is_active]
        return records

    def for_movie(self, movie_id: UUID) -> List[ScheduleRecord]:
        return [r for r in self.all_in_order() if r.movie_id == movie_id]

    def for_hall(self, hall_id: UUID) -> List[ScheduleRecord]:
        return [r for r in self.all_in_order() if r.hall_id == hall_id]


# ---------------------------------------------------------------------------
# Reservations by id / student
# ---------------------------------------------------------------------------


class ReservationCache:
    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory
        self._by_id: Dict[UUID, ReservationRecord] = {}
        self._by_student: Dict[UUID, set] = {}
        self._lock = threading.RLock()

    def load(self) -> int:
        with self._session_factory() as db:
            rows = db.scalars(select(Reservation)).all()
            records = [ReservationRecord.from_model(r) for r in rows]
        with self._lock:
            self._by_id.clear()
            self._by_student.clear()
            for record in records:
                self.put(record)
        return len(records)

    def put(self, record: ReservationRecord) -> None:
        with self._lock:
            self._by_id[record.id] = record
            self._by_student.setdefault(record.student_id, set()).add(record.id)

    def remove(self, reservation_id: UUID) -> None:
        with self._lock:
            record = self._by_id.pop(reservation_id, None)
            if record is not None:
                self._by_student.get(record.student_id, set()).discard(reservation_id)

    def get(self, reservation_id: UUID) -> Optional[ReservationRecord]:
        with self._lock:
            record = self._by_id.get(reservation_id)
        if record is not None:
            return record
        with self._session_factory() as db:
            row = db.get(Reservation, reservation_id)
            if row is None:
                return None
            record = ReservationRecord.from_model(row)
        self.put(record)
        return record

    def for_student(self, student_id: UUID) -> List[ReservationRecord]:
        """Newest first."""
        with self._lock:
            records = [self._by_id[i] for i in self._by_student.get(student_id, ())]
        return sorted(records, key=lambda r: r.reservation_time, reverse=True)

    def all(self) -> List[ReservationRecord]:
        with self._lock:
            records = list(self._by_id.values())
        return sorted(records, key=lambda r: r.reservation_time, reverse=True)
