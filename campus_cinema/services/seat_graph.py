"""
In-memory seat graph for every hall.

Seats are vertices keyed by (hall id, seat label); edges join seats that
sit next to each other. Occupancy is tracked per showing: a seat keeps the
set of schedule ids it is currently reserved for, so booking ``A1`` for the
19:00 show leaves ``A1`` free for the 21:30 show in the same hall.

The graph is a fast-path projection of the confirmed reservations in the
database. BookingCoordinator flips single seats; HallService restores or
releases the flags of a whole showing when it is switched on or off.
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple
from uuid import UUID

from campus_cinema.core.errors import InvalidReference, NotFound
from campus_cinema.services.seat_layout import HallLayout, neighbour_pairs

logger = logging.getLogger(__name__)

EMPTY_CELL = "   "
OCCUPIED_MARK = "X"
FREE_MARK = "O"

SeatKey = Tuple[UUID, str]


@dataclass
class Seat:
    seat_id: str
    hall_id: UUID
    row: int
    column: int
    tier: str
    reserved_for: Set[UUID] = field(default_factory=set)

    def is_reserved(self, schedule_id: Optional[UUID]) -> bool:
        return schedule_id is not None and schedule_id in self.reserved_for

    def __str__(self) -> str:
        return self.seat_id


class HallSeatGraph:
    def __init__(self) -> None:
        self._seats: Dict[SeatKey, Seat] = {}
        self._adjacency: Dict[SeatKey, Set[str]] = {}
        self._halls: Dict[UUID, Set[str]] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_seat(self, seat: Seat) -> None:
        key = (seat.hall_id, seat.seat_id)
        with self._lock:
            self._seats[key] = seat
            self._adjacency[key] = set()
            self._halls.setdefault(seat.hall_id, set()).add(seat.seat_id)

    def add_edge(self, hall_id: UUID, seat_a: str, seat_b: str) -> None:
        key_a, key_b = (hall_id, seat_a), (hall_id, seat_b)
        with self._lock:
            for key in (key_a, key_b):
                if key not in self._seats:
                    raise InvalidReference(f"Seat {key[1]} is not registered in hall {hall_id}")
            self._adjacency[key_a].add(seat_b)
            self._adjacency[key_b].add(seat_a)

    def populate_hall(self, hall_id: UUID, layout: HallLayout) -> int:
        """Register every seat of ``layout`` and link neighbouring seats."""
        with self._lock:
            for position in layout.positions:
                self.add_seat(Seat(
                    seat_id=position.seat_id,
                    hall_id=hall_id,
                    row=position.row,
                    column=position.column,
                    tier=position.tier,
                ))
            for seat_a, seat_b in neighbour_pairs(layout.positions):
                self.add_edge(hall_id, seat_a.seat_id, seat_b.seat_id)
        logger.info("Registered %d seats for hall %s", len(layout.positions), hall_id)
        return len(layout.positions)

    def remove_hall(self, hall_id: UUID) -> int:
        with self._lock:
            seat_ids = self._halls.pop(hall_id, set())
            for seat_id in seat_ids:
                self._seats.pop((hall_id, seat_id), None)
                self._adjacency.pop((hall_id, seat_id), None)
        return len(seat_ids)

    def has_hall(self, hall_id: UUID) -> bool:
        with self._lock:
            return bool(self._halls.get(hall_id))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_seat(self, hall_id: UUID, seat_id: str) -> Optional[Seat]:
        with self._lock:
            return self._seats.get((hall_id, seat_id))

    def seat_exists(self, hall_id: UUID, seat_id: str) -> bool:
        with self._lock:
            return (hall_id, seat_id) in self._seats

    def get_adjacent_seats(self, hall_id: UUID, seat_id: str) -> Set[str]:
        with self._lock:
            key = (hall_id, seat_id)
            if key not in self._seats:
                raise NotFound(f"Seat {seat_id} does not exist in hall {hall_id}")
            return set(self._adjacency[key])

    def get_seats_in_hall(self, hall_id: UUID) -> List[Seat]:
        with self._lock:
            seats = [self._seats[(hall_id, s)] for s in self._halls.get(hall_id, ())]
        return sorted(seats, key=lambda s: (s.row, s.column))

    def get_available_seats(self, hall_id: UUID, schedule_id: Optional[UUID]) -> List[Seat]:
        return [s for s in self.get_seats_in_hall(hall_id) if not s.is_reserved(schedule_id)]

    def get_reserved_seats(self, hall_id: UUID, schedule_id: Optional[UUID]) -> List[Seat]:
        return [s for s in self.get_seats_in_hall(hall_id) if s.is_reserved(schedule_id)]

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    def reserve_seat(self, hall_id: UUID, seat_id: str, schedule_id: UUID) -> bool:
        """Flag the seat as taken for one showing. False if unknown or already taken."""
        with self._lock:
            seat = self._seats.get((hall_id, seat_id))
            if seat is None or seat.is_reserved(schedule_id):
                return False
            seat.reserved_for.add(schedule_id)
            return True

    def cancel_reservation(self, hall_id: UUID, seat_id: str, schedule_id: UUID) -> bool:
        """Clear the flag for one showing. False if unknown or not taken."""
        with self._lock:
            seat = self._seats.get((hall_id, seat_id))
            if seat is None or not seat.is_reserved(schedule_id):
                return False
            seat.reserved_for.discard(schedule_id)
            return True

    def release_schedule(self, hall_id: UUID, schedule_id: UUID) -> int:
        """Drop every flag a retired showing holds in the hall. Returns the count."""
        released = 0
        with self._lock:
            for seat_id in self._halls.get(hall_id, ()):
                seat = self._seats[(hall_id, seat_id)]
                if schedule_id in seat.reserved_for:
                    seat.reserved_for.discard(schedule_id)
                    released += 1
        return released

    # ------------------------------------------------------------------
    # Queries for the booking screens
    # ------------------------------------------------------------------

    def find_best_adjacent_seats(
        self, hall_id: UUID, count: int, schedule_id: Optional[UUID]
    ) -> List[Seat]:
        """
        First run of ``count`` free seats in one row with consecutive columns,
        scanning rows front to back and columns left to right. Greedy: this
        does not look for the most central block, only the first one.
        """
        if count <= 0:
            return []

        run: List[Seat] = []
        for seat in self.get_available_seats(hall_id, schedule_id):
            if run and seat.row == run[-1].row and seat.column == run[-1].column + 1:
                run.append(seat)
            else:
                run = [seat]
            if len(run) == count:
                return run
        return []

    def generate_seating_chart(
        self, hall_id: UUID, schedule_id: Optional[UUID] = None
    ) -> List[List[str]]:
        """Grid of display tokens: blank cells, ``A1X`` for taken, ``A1O`` for free."""
        seats = self.get_seats_in_hall(hall_id)
        if not seats:
            return []

        max_row = max(s.row for s in seats)
        max_col = max(s.column for s in seats)
        chart = [[EMPTY_CELL] * (max_col + 1) for _ in range(max_row + 1)]
        for seat in seats:
            mark = OCCUPIED_MARK if seat.is_reserved(schedule_id) else FREE_MARK
            chart[seat.row][seat.column] = seat.seat_id + mark
        return chart
