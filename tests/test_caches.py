import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from campus_cinema.models.reservation import CANCELLED, CONFIRMED
from campus_cinema.services.caches import (
    ReservationCache,
    ReservationRecord,
    ScheduleIndex,
    ScheduleRecord,
    StudentDirectory,
    update_quietly,
)

BASE = datetime(2030, 5, 1, 18, 0)
HALL_1 = uuid.UUID(int=1)
HALL_2 = uuid.UUID(int=2)


def _schedule(start, hall_id, movie_id=None, active=True):
    return ScheduleRecord(
        id=uuid.uuid4(),
        movie_id=movie_id or uuid.uuid4(),
        hall_id=hall_id,
        start_time=start,
        end_time=start + timedelta(hours=2),
        price=Decimal("8.00"),
        is_active=active,
    )


def _reservation(student_id, minutes, status=CONFIRMED):
    return ReservationRecord(
        id=uuid.uuid4(),
        student_id=student_id,
        schedule_id=uuid.uuid4(),
        seat_id="A1",
        price=Decimal("8.00"),
        status=status,
        reservation_time=BASE + timedelta(minutes=minutes),
    )


def test_range_is_ordered_by_start_then_hall():
    index = ScheduleIndex(session_factory=None)
    late = _schedule(BASE + timedelta(hours=3), HALL_1)
    early_hall_2 = _schedule(BASE, HALL_2)
    early_hall_1 = _schedule(BASE, HALL_1)
    outside = _schedule(BASE + timedelta(days=2), HALL_1)
    for record in (late, early_hall_2, outside, early_hall_1):
        index.put(record)

    found = index.in_range(BASE, BASE + timedelta(hours=3))

    assert [r.id for r in found] == [early_hall_1.id, early_hall_2.id, late.id]


def test_range_bounds_are_inclusive_and_can_skip_inactive():
    index = ScheduleIndex(session_factory=None)
    at_start = _schedule(BASE, HALL_1)
    at_end = _schedule(BASE + timedelta(hours=1), HALL_2, active=False)
    index.put(at_start)
    index.put(at_end)

    assert len(index.in_range(BASE, BASE + timedelta(hours=1))) == 2
    assert index.in_range(BASE, BASE + timedelta(hours=1), active_only=True) == [at_start]


def test_put_replaces_moved_schedule():
    index = ScheduleIndex(session_factory=None)
    record = _schedule(BASE, HALL_1)
    index.put(record)
    moved = ScheduleRecord(**{**record.__dict__, "start_time": BASE + timedelta(days=1)})
    index.put(moved)

    assert index.all_in_order() == [moved]
    assert index.in_range(BASE, BASE + timedelta(hours=1)) == []


def test_for_movie_and_hall():
    index = ScheduleIndex(session_factory=None)
    movie_id = uuid.uuid4()
    first = _schedule(BASE, HALL_1, movie_id=movie_id)
    second = _schedule(BASE + timedelta(hours=4), HALL_2, movie_id=movie_id)
    index.put(second)
    index.put(first)
    index.put(_schedule(BASE, HALL_2))

    assert index.for_movie(movie_id) == [first, second]
    assert [r.hall_id for r in index.for_hall(HALL_1)] == [HALL_1]


def test_reservations_by_student_newest_first():
    cache = ReservationCache(session_factory=None)
    student_id = uuid.uuid4()
    older = _reservation(student_id, 0)
    newer = _reservation(student_id, 30, status=CANCELLED)
    cache.put(older)
    cache.put(newer)
    cache.put(_reservation(uuid.uuid4(), 10))

    assert cache.for_student(student_id) == [newer, older]
    assert older.is_confirmed and not newer.is_confirmed


def test_cache_miss_falls_back_to_the_database(cinema, student):
    directory = StudentDirectory(cinema.session_factory)

    record = directory.get(student.id)

    assert record.email == "ada@campus.edu"
    assert directory.get_by_email("ADA@campus.edu").id == student.id
    assert directory.get(uuid.uuid4()) is None


def test_update_quietly_logs_instead_of_raising(caplog):
    def broken(_):
        raise RuntimeError("boom")

    update_quietly(broken, object())

    assert "Cache update" in caplog.text
