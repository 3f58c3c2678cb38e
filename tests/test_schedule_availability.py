import uuid
from datetime import timedelta, timezone
from decimal import Decimal

import pytest

from campus_cinema.core.errors import HallConflict, InvalidReference
from campus_cinema.services.schedule_availability import find_conflict, is_hall_available


def test_overlapping_interval_conflicts(db, schedule, showtime):
    # existing 10:00-12:00
    assert not is_hall_available(db, schedule.hall_id, showtime + timedelta(hours=1), showtime + timedelta(hours=3))


def test_touching_endpoints_conflict(db, schedule, showtime):
    assert not is_hall_available(db, schedule.hall_id, showtime + timedelta(hours=2), showtime + timedelta(hours=4))


def test_disjoint_interval_is_free(db, schedule, showtime):
    later = showtime + timedelta(hours=2, minutes=1)
    assert is_hall_available(db, schedule.hall_id, later, later + timedelta(hours=2))


def test_schedule_does_not_conflict_with_itself(db, schedule):
    assert is_hall_available(
        db, schedule.hall_id, schedule.start_time, schedule.end_time, exclude_schedule_id=schedule.id
    )


def test_other_hall_is_unaffected(db, cinema, schedule):
    other = cinema.halls.create_hall(db, name="Hall B", capacity=50)
    assert is_hall_available(db, other.id, schedule.start_time, schedule.end_time)


def test_inactive_schedule_does_not_block(db, cinema, schedule):
    cinema.schedules.deactivate_schedule(db, schedule)
    assert find_conflict(db, schedule.hall_id, schedule.start_time, schedule.end_time) is None


def test_create_schedule_derives_end_from_movie(schedule, showtime):
    assert schedule.end_time == showtime + timedelta(minutes=120)
    assert schedule.is_active


def test_create_overlapping_schedule_raises(db, cinema, movie, schedule, showtime):
    with pytest.raises(HallConflict) as excinfo:
        cinema.schedules.create_schedule(
            db, movie_id=movie.id, hall_id=schedule.hall_id,
            start_time=showtime + timedelta(hours=2), price=Decimal("9.50"),
        )
    assert excinfo.value.conflicting_schedule_id == schedule.id


def test_update_moves_schedule_when_free(db, cinema, schedule, showtime):
    moved = cinema.schedules.update_schedule(db, schedule, start_time=showtime + timedelta(hours=5))

    assert moved.end_time == showtime + timedelta(hours=7)
    assert cinema.schedule_index.get(schedule.id).start_time == showtime + timedelta(hours=5)


def test_update_into_a_busy_slot_raises(db, cinema, movie, schedule, showtime):
    evening = cinema.schedules.create_schedule(
        db, movie_id=movie.id, hall_id=schedule.hall_id,
        start_time=showtime + timedelta(hours=6), price=Decimal("9.50"),
    )

    with pytest.raises(HallConflict):
        cinema.schedules.update_schedule(db, evening, start_time=showtime + timedelta(hours=1))


def test_unknown_movie_is_rejected(db, cinema, hall, showtime):
    with pytest.raises(InvalidReference):
        cinema.schedules.create_schedule(
            db, movie_id=uuid.uuid4(), hall_id=hall.id, start_time=showtime, price=Decimal("5")
        )


def test_listing_uses_the_ordered_index(db, cinema, movie, schedule, showtime):
    second = cinema.schedules.create_schedule(
        db, movie_id=movie.id, hall_id=schedule.hall_id,
        start_time=showtime + timedelta(hours=3), price=Decimal("9.50"),
    )

    listed = cinema.schedules.list_schedules(start_from=showtime, start_to=showtime + timedelta(hours=3))

    assert [r.id for r in listed] == [schedule.id, second.id]
    assert cinema.schedules.list_schedules(movie_id=movie.id, upcoming=True)[0].id == schedule.id


def test_past_schedules_are_deactivated(db, cinema, movie, hall, schedule, showtime):
    from campus_cinema.utils.schedules import deactivate_past_schedules

    yesterday = cinema.schedules.create_schedule(
        db, movie_id=movie.id, hall_id=hall.id,
        start_time=showtime - timedelta(days=2), price=Decimal("9.50"),
    )

    expired = deactivate_past_schedules(db)

    assert expired == [yesterday.id]
    db.refresh(schedule)
    assert schedule.is_active


def test_retiring_past_schedules_frees_their_seats(db, cinema, student, movie, hall, schedule, showtime):
    yesterday = cinema.schedules.create_schedule(
        db, movie_id=movie.id, hall_id=hall.id,
        start_time=showtime - timedelta(days=2), price=Decimal("9.50"),
    )
    cinema.booking.book(student.id, yesterday.id, "A1")
    cinema.booking.book(student.id, schedule.id, "A1")

    assert cinema.schedules.retire_past_schedules(db) == [yesterday.id]

    seat = cinema.graph.get_seat(hall.id, "A1")
    assert seat.reserved_for == {schedule.id}
    assert cinema.schedule_index.get(yesterday.id).is_active is False
    assert [r.id for r in cinema.schedules.list_schedules()] == [schedule.id]


def test_utc_times_are_read_as_local(db, cinema, movie, hall, schedule, showtime):
    utc_start = (showtime + timedelta(hours=4)).astimezone(timezone.utc)

    later = cinema.schedules.create_schedule(
        db, movie_id=movie.id, hall_id=hall.id, start_time=utc_start, price=Decimal("9.50"),
    )

    assert later.start_time == showtime + timedelta(hours=4)
    assert later.start_time.tzinfo is None

    window_start = (showtime - timedelta(hours=1)).astimezone(timezone.utc)
    window_end = (showtime + timedelta(hours=1)).astimezone(timezone.utc)
    listed = cinema.schedules.list_schedules(start_from=window_start, start_to=window_end)
    assert [r.id for r in listed] == [schedule.id]

    upcoming = cinema.schedules.list_schedules(start_from=window_start, upcoming=True)
    assert [r.id for r in upcoming] == [schedule.id, later.id]
