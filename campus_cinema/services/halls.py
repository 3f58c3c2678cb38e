"""
Hall administration and seat-graph population.

Halls only ever come in the standard sizes of the layout generator: a
requested capacity is snapped to the closest one before it is stored, so
the generated seat count always matches the hall record.
"""
import logging
from contextlib import ExitStack
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from campus_cinema.core.errors import NotFound
from campus_cinema.db.transactions import commit_or_raise
from campus_cinema.models.hall import Hall
from campus_cinema.models.reservation import Reservation, CONFIRMED
from campus_cinema.models.schedule import MovieSchedule
from campus_cinema.services import seat_layout
from campus_cinema.services.caches import ScheduleIndex, ScheduleRecord, update_quietly
from campus_cinema.services.locks import KeyedLocks, layout_key, schedule_key
from campus_cinema.services.seat_graph import HallSeatGraph, Seat

logger = logging.getLogger(__name__)


def _snap_capacity(capacity: int) -> int:
    standard = seat_layout.standard_capacity(capacity)
    if standard != capacity:
        logger.warning(
            "Non-standard capacity %d, using closest standard capacity %d", capacity, standard
        )
    return standard


class HallService:
    def __init__(
        self,
        graph: HallSeatGraph,
        locks: KeyedLocks,
        schedule_index: Optional[ScheduleIndex] = None,
    ) -> None:
        self.graph = graph
        self.locks = locks
        self.schedule_index = schedule_index

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def get_hall(self, db: Session, hall_id: UUID) -> Hall:
        hall = db.query(Hall).filter(Hall.id == hall_id, Hall.is_active == True).first()  # noqa: E712
        if not hall:
            raise NotFound(f"Hall {hall_id} not found")
        return hall

    def list_halls(self, db: Session) -> List[Hall]:
        return db.query(Hall).filter(Hall.is_active == True).order_by(Hall.name).all()  # noqa: E712

    def create_hall(self, db: Session, **fields) -> Hall:
        fields["capacity"] = _snap_capacity(fields["capacity"])
        hall = Hall(**fields)
        db.add(hall)
        commit_or_raise(db, "save hall")
        db.refresh(hall)
        logger.info("Hall saved with ID: %s", hall.id)

        self.ensure_seats(db, hall)
        return hall

    def update_hall(self, db: Session, hall: Hall, **updates) -> Hall:
        updates = {field: value for field, value in updates.items() if value is not None}
        if "capacity" in updates:
            updates["capacity"] = _snap_capacity(updates["capacity"])
        old_capacity = hall.capacity

        for field, value in updates.items():
            setattr(hall, field, value)
        commit_or_raise(db, "update hall")
        db.refresh(hall)

        if hall.capacity != old_capacity:
            logger.info(
                "Capacity of hall %s changed from %d to %d, regenerating layout",
                hall.id, old_capacity, hall.capacity,
            )
            self.regenerate_seats(db, hall)
        return hall

    def delete_hall(self, db: Session, hall: Hall) -> None:
        """Soft-delete the hall, retire its schedules and drop its seats."""
        hall.is_active = False
        schedules = (
            db.query(MovieSchedule)
            .filter(MovieSchedule.hall_id == hall.id, MovieSchedule.is_active == True)  # noqa: E712
            .all()
        )
        with ExitStack() as stack:
            for schedule in schedules:
                stack.enter_context(self.locks.hold(schedule_key(schedule.id)))
                schedule.is_active = False
            commit_or_raise(db, "delete hall")
            with self.locks.hold(layout_key(hall.id)):
                removed = self.graph.remove_hall(hall.id)

        if self.schedule_index is not None:
            for schedule in schedules:
                update_quietly(self.schedule_index.put, ScheduleRecord.from_model(schedule))
        logger.info(
            "Hall %s deleted: %d schedule(s) deactivated, %d seat(s) removed",
            hall.id, len(schedules), removed,
        )

    # ------------------------------------------------------------------
    # Seat graph population
    # ------------------------------------------------------------------

    def ensure_seats(self, db: Session, hall: Hall) -> int:
        """Build the hall's seats on first reference. Returns the seat count."""
        with self.locks.hold(layout_key(hall.id)):
            if self.graph.has_hall(hall.id):
                return len(self.graph.get_seats_in_hall(hall.id))
            return self._build_seats(db, hall)

    def regenerate_seats(self, db: Session, hall: Hall) -> int:
        with self.locks.hold(layout_key(hall.id)):
            self.graph.remove_hall(hall.id)
            return self._build_seats(db, hall)

    def _build_seats(self, db: Session, hall: Hall) -> int:
        layout = seat_layout.plan(hall.capacity)
        logger.info(
            "Creating a %d x %d layout%s for hall %s (capacity: %d)",
            layout.rows, layout.max_seats_per_row,
            " with center aisle" if layout.center_aisle else "",
            hall.name, hall.capacity,
        )
        created = self.graph.populate_hall(hall.id, layout)
        self._restore_occupancy(db, hall.id)

        if hall.seating_layout != layout.summary:
            hall.seating_layout = layout.summary
            commit_or_raise(db, "store hall layout")
        return created

    def restore_schedule(self, db: Session, schedule: MovieSchedule) -> None:
        """Re-flag the confirmed seats of a schedule that has just been switched on."""
        with self.locks.hold(layout_key(schedule.hall_id)):
            if not self.graph.has_hall(schedule.hall_id):
                self._build_seats(db, schedule.hall)
            else:
                self._restore_occupancy(db, schedule.hall_id, schedule.id)

    def release_schedule(self, hall_id: UUID, schedule_id: UUID) -> int:
        released = self.graph.release_schedule(hall_id, schedule_id)
        if released:
            logger.info("Released %d seat(s) held by schedule %s", released, schedule_id)
        return released

    def _restore_occupancy(self, db: Session, hall_id: UUID, schedule_id: Optional[UUID] = None) -> None:
        """Re-flag seats held by confirmed reservations of the hall's active schedules."""
        query = (
            db.query(Reservation.schedule_id, Reservation.seat_id)
            .join(MovieSchedule, MovieSchedule.id == Reservation.schedule_id)
            .filter(
                MovieSchedule.hall_id == hall_id,
                MovieSchedule.is_active == True,  # noqa: E712
                Reservation.status == CONFIRMED,
            )
        )
        if schedule_id is not None:
            query = query.filter(Reservation.schedule_id == schedule_id)
        orphaned = 0
        for schedule_id, seat_id in query.all():
            if not self.graph.reserve_seat(hall_id, seat_id, schedule_id):
                if not self.graph.seat_exists(hall_id, seat_id):
                    orphaned += 1
        if orphaned:
            logger.warning(
                "%d confirmed reservation(s) in hall %s refer to seats missing from the current layout",
                orphaned, hall_id,
            )

    def hydrate(self, db: Session) -> int:
        """Populate the graph for every active hall. Returns the number of halls."""
        halls = self.list_halls(db)
        logger.info("Initializing hall graph with %d halls", len(halls))
        for hall in halls:
            self.ensure_seats(db, hall)
        return len(halls)

    # ------------------------------------------------------------------
    # Seat queries
    # ------------------------------------------------------------------

    def seats(self, db: Session, hall_id: UUID) -> List[Seat]:
        hall = self.get_hall(db, hall_id)
        self.ensure_seats(db, hall)
        return self.graph.get_seats_in_hall(hall_id)

    def available_seats(self, db: Session, hall_id: UUID, schedule_id: UUID) -> List[Seat]:
        self.ensure_seats(db, self.get_hall(db, hall_id))
        return self.graph.get_available_seats(hall_id, schedule_id)

    def seating_chart(
        self, db: Session, hall_id: UUID, schedule_id: Optional[UUID] = None
    ) -> List[List[str]]:
        self.ensure_seats(db, self.get_hall(db, hall_id))
        return self.graph.generate_seating_chart(hall_id, schedule_id)

    def adjacent_seats(self, db: Session, hall_id: UUID, seat_id: str) -> List[str]:
        self.ensure_seats(db, self.get_hall(db, hall_id))
        return sorted(self.graph.get_adjacent_seats(hall_id, seat_id))

    def best_adjacent_seats(
        self, db: Session, hall_id: UUID, count: int, schedule_id: UUID
    ) -> List[Seat]:
        self.ensure_seats(db, self.get_hall(db, hall_id))
        return self.graph.find_best_adjacent_seats(hall_id, count, schedule_id)
