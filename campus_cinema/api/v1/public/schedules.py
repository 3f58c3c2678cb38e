from uuid import UUID
from typing import List, Optional
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campus_cinema.db.session import get_db
from campus_cinema.api.deps import get_cinema
from campus_cinema.services.cinema import Cinema
from campus_cinema.schemas.schedule import Schedule as ScheduleSchema, ReservedSeats, BestSeats
from campus_cinema.schemas.hall import SeatList, SeatingChart, seat_list
from campus_cinema.utils.times import to_naive_local

router = APIRouter(prefix="/schedules", tags=["Schedules"])


@router.get("/", response_model=List[ScheduleSchema])
def list_schedules(
    movie_id: Optional[UUID] = None,
    hall_id: Optional[UUID] = None,
    start_from: Optional[datetime] = Query(None, description="Earliest start time (inclusive)"),
    start_to: Optional[datetime] = Query(None, description="Latest start time (inclusive)"),
    upcoming: bool = Query(False, description="Only showings that have not started yet"),
    cinema: Cinema = Depends(get_cinema),
):
    """Active showings ordered by start time, then hall."""
    return cinema.schedules.list_schedules(
        movie_id=movie_id,
        hall_id=hall_id,
        start_from=to_naive_local(start_from),
        start_to=to_naive_local(start_to),
        upcoming=upcoming,
    )


@router.get("/{schedule_id}", response_model=ScheduleSchema)
def get_schedule(schedule_id: UUID, db: Session = Depends(get_db), cinema: Cinema = Depends(get_cinema)):
    return cinema.schedules.get_schedule(db, schedule_id)


# ---------------------------------------------------------------------------
# Seat map for a showing
# ---------------------------------------------------------------------------


@router.get("/{schedule_id}/seats", response_model=SeatList)
def list_schedule_seats(
    schedule_id: UUID,
    available_only: bool = False,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
):
    schedule = cinema.schedules.get_schedule(db, schedule_id)
    if available_only:
        seats = cinema.halls.available_seats(db, schedule.hall_id, schedule_id)
    else:
        seats = cinema.halls.seats(db, schedule.hall_id)
    return seat_list(schedule.hall_id, seats, schedule_id)


@router.get("/{schedule_id}/seating-chart", response_model=SeatingChart)
def schedule_seating_chart(
    schedule_id: UUID,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
):
    """Grid of seat tokens: `A1O` free, `A1X` taken, three spaces for no seat."""
    schedule = cinema.schedules.get_schedule(db, schedule_id)
    chart = cinema.halls.seating_chart(db, schedule.hall_id, schedule_id)
    return SeatingChart(hall_id=schedule.hall_id, schedule_id=schedule_id, chart=chart)


@router.get("/{schedule_id}/reserved-seats", response_model=ReservedSeats)
def reserved_seats(
    schedule_id: UUID,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
):
    cinema.schedules.get_schedule(db, schedule_id)
    return ReservedSeats(schedule_id=schedule_id, seat_ids=cinema.booking.reserved_seats(schedule_id))


@router.get("/{schedule_id}/best-seats", response_model=BestSeats)
def best_seats(
    schedule_id: UUID,
    count: int = Query(2, ge=1, le=20, description="Number of seats side by side"),
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
):
    """First run of `count` free seats in one row, front to back. Empty when none exists."""
    schedule = cinema.schedules.get_schedule(db, schedule_id)
    seats = cinema.halls.best_adjacent_seats(db, schedule.hall_id, count, schedule_id)
    return BestSeats(schedule_id=schedule_id, count=count, seat_ids=[s.seat_id for s in seats])
