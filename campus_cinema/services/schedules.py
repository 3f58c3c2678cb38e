import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from campus_cinema.core.errors import InvalidReference, ScheduleNotFound
from campus_cinema.db.transactions import commit_or_raise
from campus_cinema.models.hall import Hall
from campus_cinema.models.movie import Movie
from campus_cinema.models.reservation import Reservation, CONFIRMED
from campus_cinema.models.schedule import MovieSchedule
from campus_cinema.services.caches import ScheduleIndex, ScheduleRecord, update_quietly
from campus_cinema.services.halls import HallService
from campus_cinema.services.locks import KeyedLocks, hall_key, schedule_key
from campus_cinema.services.schedule_availability import ensure_hall_available
from campus_cinema.utils.schedules import deactivate_past_schedules
from campus_cinema.utils.times import to_naive_local

logger = logging.getLogger(__name__)


def _active_movie(db: Session, movie_id: UUID) -> Movie:
    movie = db.query(Movie).filter(Movie.id == movie_id, Movie.is_active == True).first()  # noqa: E712
    if not movie:
        raise InvalidReference(f"Movie {movie_id} does not exist")
    return movie


def _active_hall(db: Session, hall_id: UUID) -> Hall:
    hall = db.query(Hall).filter(Hall.id == hall_id, Hall.is_active == True).first()  # noqa: E712
    if not hall:
        raise InvalidReference(f"Hall {hall_id} does not exist")
    return hall


class ScheduleService:
    """
    Schedule writes. The end time is always start + movie duration, and the
    overlap check and the write run under the hall's lock.
    """

    def __init__(self, locks: KeyedLocks, index: ScheduleIndex, halls: HallService) -> None:
        self.locks = locks
        self.index = index
        self.halls = halls

    def get_schedule(self, db: Session, schedule_id: UUID, active_only: bool = True) -> MovieSchedule:
        schedule = db.get(MovieSchedule, schedule_id)
        if schedule is None or (active_only and not schedule.is_active):
            raise ScheduleNotFound(f"Schedule {schedule_id} not found")
        return schedule

    def create_schedule(
        self,
        db: Session,
        movie_id: UUID,
        hall_id: UUID,
        start_time: datetime,
        price: Decimal,
    ) -> MovieSchedule:
        start_time = to_naive_local(start_time)
        movie = _active_movie(db, movie_id)
        hall = _active_hall(db, hall_id)
        end_time = start_time + timedelta(minutes=movie.duration_minutes)

        with self.locks.hold(hall_key(hall_id)):
            ensure_hall_available(db, hall_id, start_time, end_time)
            schedule = MovieSchedule(
                movie_id=movie_id,
                hall_id=hall_id,
                start_time=start_time,
                end_time=end_time,
                price=price,
                is_active=True,
            )
            db.add(schedule)
            commit_or_raise(db, "save schedule")
            db.refresh(schedule)

        update_quietly(self.index.put, ScheduleRecord.from_model(schedule))
        self.halls.ensure_seats(db, hall)
        logger.info(
            "Scheduled %s in hall %s from %s to %s (schedule %s)",
            movie.title, hall.name, start_time, end_time, schedule.id,
        )
        return schedule

    def update_schedule(self, db: Session, schedule: MovieSchedule, **updates) -> MovieSchedule:
        """
        Apply ``updates``; a change of movie, hall, start or activation is
        re-checked for overlap. Bookings for the schedule wait until the write
        is done, so the seat graph follows the schedule on and off.
        """
        movie_id = updates.get("movie_id") or schedule.movie_id
        hall_id = updates.get("hall_id") or schedule.hall_id
        start_time = to_naive_local(updates.get("start_time")) or schedule.start_time
        is_active = schedule.is_active if updates.get("is_active") is None else updates["is_active"]

        movie = _active_movie(db, movie_id)
        _active_hall(db, hall_id)
        end_time = start_time + timedelta(minutes=movie.duration_minutes)

        with self.locks.hold(hall_key(hall_id)), self.locks.hold(schedule_key(schedule.id)):
            old_hall_id, was_active = schedule.hall_id, bool(schedule.is_active)
            if hall_id != old_hall_id and self._has_confirmed_reservations(db, schedule.id):
                raise InvalidReference("Cannot move a schedule with confirmed reservations to another hall")
            if is_active:
                ensure_hall_available(db, hall_id, start_time, end_time, exclude_schedule_id=schedule.id)
            schedule.movie_id = movie_id
            schedule.hall_id = hall_id
            schedule.start_time = start_time
            schedule.end_time = end_time
            schedule.is_active = is_active
            if updates.get("price") is not None:
                schedule.price = updates["price"]
            commit_or_raise(db, "update schedule")
            db.refresh(schedule)

            if was_active and not is_active:
                self.halls.release_schedule(old_hall_id, schedule.id)
            elif is_active and not was_active:
                self.halls.restore_schedule(db, schedule)

        update_quietly(self.index.put, ScheduleRecord.from_model(schedule))
        logger.info("Schedule %s updated", schedule.id)
        return schedule

    def deactivate_schedule(self, db: Session, schedule: MovieSchedule) -> MovieSchedule:
        with self.locks.hold(schedule_key(schedule.id)):
            schedule.is_active = False
            commit_or_raise(db, "deactivate schedule")
            db.refresh(schedule)
            self.halls.release_schedule(schedule.hall_id, schedule.id)
        update_quietly(self.index.put, ScheduleRecord.from_model(schedule))
        logger.info("Schedule %s deactivated", schedule.id)
        return schedule

    def retire_past_schedules(self, db: Session, now: Optional[datetime] = None) -> List[UUID]:
        """Deactivate every schedule that has ended and free its seats in the graph."""
        expired = deactivate_past_schedules(db, now)
        for schedule_id in expired:
            schedule = db.get(MovieSchedule, schedule_id)
            with self.locks.hold(schedule_key(schedule_id)):
                self.halls.release_schedule(schedule.hall_id, schedule_id)
            update_quietly(self.index.put, ScheduleRecord.from_model(schedule))
        if expired:
            logger.info("Deactivated %d past schedule(s)", len(expired))
        return expired

    def list_schedules(
        self,
        movie_id: Optional[UUID] = None,
        hall_id: Optional[UUID] = None,
        start_from: Optional[datetime] = None,
        start_to: Optional[datetime] = None,
        upcoming: bool = False,
    ) -> List[ScheduleRecord]:
        """Active schedules ordered by start time then hall."""
        start_from, start_to = to_naive_local(start_from), to_naive_local(start_to)
        if upcoming:
            start_from = max(start_from, datetime.now()) if start_from else datetime.now()
        if start_from or start_to:
            records = self.index.in_range(
                start_from or datetime.min, start_to or datetime.max, active_only=True
            )
        else:
            records = self.index.all_in_order(active_only=True)

        if movie_id:
            records = [r for r in records if r.movie_id == movie_id]
        if hall_id:
            records = [r for r in records if r.hall_id == hall_id]
        return records

    @staticmethod
    def _has_confirmed_reservations(db: Session, schedule_id: UUID) -> bool:
        return (
            db.query(Reservation.id)
            .filter(Reservation.schedule_id == schedule_id, Reservation.status == CONFIRMED)
            .first()
            is not None
        )
