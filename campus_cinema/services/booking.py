"""
Seat booking and cancellation.

A booking runs under the lock for its (schedule, seat) pair, with a shared
hold on the schedule so schedule writes wait for it: check the database
for a confirmed reservation, flip the seat in the graph, persist, then
refresh the reservation cache. If the write fails the seat flag is
rolled back, so a booking either lands completely or leaves nothing behind.
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from campus_cinema.core.errors import (
    NotFound,
    PersistenceFailure,
    ScheduleNotFound,
    SeatAlreadyReserved,
    SeatReservationFailed,
)
from campus_cinema.db.transactions import commit_or_raise
from campus_cinema.models.reservation import Reservation, CONFIRMED, CANCELLED
from campus_cinema.models.schedule import MovieSchedule
from campus_cinema.services.caches import (
    ReservationCache,
    ReservationRecord,
    StudentDirectory,
    update_quietly,
)
from campus_cinema.services.halls import HallService
from campus_cinema.services.locks import KeyedLocks, schedule_key, seat_key
from campus_cinema.services.seat_graph import HallSeatGraph
from campus_cinema.utils.times import to_naive_local

logger = logging.getLogger(__name__)


def _seat_order(seat_id: str):
    row, number = seat_id[:1], seat_id[1:]
    return (row, int(number) if number.isdigit() else 0, seat_id)


class BookingCoordinator:
    def __init__(
        self,
        session_factory,
        graph: HallSeatGraph,
        locks: KeyedLocks,
        reservations: ReservationCache,
        students: StudentDirectory,
        halls: HallService,
    ) -> None:
        self._session_factory = session_factory
        self.graph = graph
        self.locks = locks
        self.reservations = reservations
        self.students = students
        self.halls = halls

    def book(self, student_id: UUID, schedule_id: UUID, seat_id: str) -> ReservationRecord:
        """
        Reserve ``seat_id`` for one showing.

        Raises SeatAlreadyReserved, ScheduleNotFound, NotFound (unknown
        student), SeatReservationFailed (seat missing from the hall layout)
        or PersistenceFailure.
        """
        with self.locks.hold(seat_key(schedule_id, seat_id)), \
                self.locks.hold_shared(schedule_key(schedule_id)):
            with self._session_factory() as db:
                taken = (
                    db.query(Reservation.id)
                    .filter(
                        Reservation.schedule_id == schedule_id,
                        Reservation.seat_id == seat_id,
                        Reservation.status == CONFIRMED,
                    )
                    .first()
                )
                if taken:
                    raise SeatAlreadyReserved(f"Seat {seat_id} is already reserved for this showing")

                schedule = db.get(MovieSchedule, schedule_id)
                if schedule is None or not schedule.is_active:
                    raise ScheduleNotFound(f"Schedule {schedule_id} not found")

                if self.students.get(student_id) is None:
                    raise NotFound(f"Student {student_id} not found")

                hall_id = schedule.hall_id
                self.halls.ensure_seats(db, schedule.hall)
                if not self.graph.reserve_seat(hall_id, seat_id, schedule_id):
                    if not self.graph.seat_exists(hall_id, seat_id):
                        raise SeatReservationFailed(f"Seat {seat_id} does not exist in this hall")
                    raise SeatReservationFailed(f"Seat {seat_id} could not be reserved")

                reservation = Reservation(
                    student_id=student_id,
                    schedule_id=schedule_id,
                    seat_id=seat_id,
                    price=schedule.price,
                    status=CONFIRMED,
                    reservation_time=datetime.now(),
                )
                db.add(reservation)
                try:
                    db.commit()
                except IntegrityError as e:
                    db.rollback()
                    self.graph.cancel_reservation(hall_id, seat_id, schedule_id)
                    logger.warning("Seat %s for schedule %s taken by a concurrent writer", seat_id, schedule_id)
                    raise SeatAlreadyReserved(f"Seat {seat_id} is already reserved for this showing") from e
                except SQLAlchemyError as e:
                    db.rollback()
                    self.graph.cancel_reservation(hall_id, seat_id, schedule_id)
                    logger.error("Failed to save reservation for seat %s: %s", seat_id, e)
                    raise PersistenceFailure("Could not save reservation, please try again") from e

                db.refresh(reservation)
                record = ReservationRecord.from_model(reservation)

        update_quietly(self.reservations.put, record)
        logger.info(
            "Reservation %s: seat %s for schedule %s by student %s",
            record.id, seat_id, schedule_id, student_id,
        )
        return record

    def cancel(self, reservation_id: UUID) -> bool:
        """
        Cancel a confirmed reservation and free its seat.

        Returns False if the reservation does not exist or is not confirmed.
        If the write fails PersistenceFailure is raised and the seat stays taken.
        """
        known = self.reservations.get(reservation_id)
        if known is None:
            return False

        with self.locks.hold(seat_key(known.schedule_id, known.seat_id)), \
                self.locks.hold_shared(schedule_key(known.schedule_id)):
            with self._session_factory() as db:
                reservation = db.get(Reservation, reservation_id)
                if reservation is None or reservation.status != CONFIRMED:
                    return False

                reservation.status = CANCELLED
                reservation.cancelled_at = datetime.now()
                hall_id = reservation.schedule.hall_id
                commit_or_raise(db, "cancel reservation")

                self.graph.cancel_reservation(hall_id, reservation.seat_id, reservation.schedule_id)
                db.refresh(reservation)
                record = ReservationRecord.from_model(reservation)

        update_quietly(self.reservations.put, record)
        logger.info("Reservation %s cancelled, seat %s released", reservation_id, record.seat_id)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def reserved_seats(self, schedule_id: UUID) -> List[str]:
        with self._session_factory() as db:
            rows = (
                db.query(Reservation.seat_id)
                .filter(Reservation.schedule_id == schedule_id, Reservation.status == CONFIRMED)
                .all()
            )
        return sorted((seat_id for (seat_id,) in rows), key=_seat_order)

    def find_reservation(self, reservation_id: UUID) -> Optional[ReservationRecord]:
        return self.reservations.get(reservation_id)

    def reservations_for_student(self, student_id: UUID) -> List[ReservationRecord]:
        return self.reservations.for_student(student_id)

    def list_reservations(
        self, status: Optional[str] = None, schedule_id: Optional[UUID] = None
    ) -> List[ReservationRecord]:
        records = self.reservations.all()
        if status:
            records = [r for r in records if r.status == status]
        if schedule_id:
            records = [r for r in records if r.schedule_id == schedule_id]
        return records

    def reservations_in_range(self, start: datetime, end: datetime) -> List[ReservationRecord]:
        """Reservations made within [start, end], oldest first."""
        start, end = to_naive_local(start), to_naive_local(end)
        records = [r for r in self.reservations.all() if start <= r.reservation_time <= end]
        return sorted(records, key=lambda r: r.reservation_time)
