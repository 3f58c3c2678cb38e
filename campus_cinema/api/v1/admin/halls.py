from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_cinema.db.session import get_db
from campus_cinema.api.deps import get_cinema, get_current_admin
from campus_cinema.models.student import Student
from campus_cinema.services.cinema import Cinema
from campus_cinema.schemas.hall import (
    Hall as HallSchema,
    HallCreate,
    HallUpdate,
    SeatList,
    SeatingChart,
    AdjacentSeats,
    seat_list,
)
from campus_cinema.schemas.schedule import Schedule as ScheduleSchema

router = APIRouter(prefix="/admin/halls", tags=["Admin - Halls"])


@router.post("/", response_model=HallSchema, status_code=status.HTTP_201_CREATED)
def create_hall(
    data: HallCreate,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """
    Create a hall and generate its seats.
    Capacity is snapped to the closest standard size: 25, 50, 75, 100, 150 or 200.
    """
    return cinema.halls.create_hall(db, **data.model_dump())


@router.get("/", response_model=List[HallSchema])
def list_halls(
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    return cinema.halls.list_halls(db)


@router.get("/{hall_id}", response_model=HallSchema)
def get_hall(
    hall_id: UUID,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    return cinema.halls.get_hall(db, hall_id)


@router.patch("/{hall_id}", response_model=HallSchema)
def update_hall(
    hall_id: UUID,
    data: HallUpdate,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """A capacity change regenerates the layout. Reservations keep their seats where those still exist."""
    hall = cinema.halls.get_hall(db, hall_id)
    return cinema.halls.update_hall(db, hall, **data.model_dump(exclude_unset=True))


@router.delete("/{hall_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hall(
    hall_id: UUID,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """Soft delete. Active schedules in the hall are deactivated."""
    hall = cinema.halls.get_hall(db, hall_id)
    cinema.halls.delete_hall(db, hall)


# ---------------------------------------------------------------------------
# Seats
# ---------------------------------------------------------------------------


@router.get("/{hall_id}/seats", response_model=SeatList)
def list_hall_seats(
    hall_id: UUID,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    return seat_list(hall_id, cinema.halls.seats(db, hall_id))


@router.get("/{hall_id}/seating-chart", response_model=SeatingChart)
def hall_seating_chart(
    hall_id: UUID,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    return SeatingChart(hall_id=hall_id, chart=cinema.halls.seating_chart(db, hall_id))


@router.get("/{hall_id}/seats/{seat_id}/adjacent", response_model=AdjacentSeats)
def adjacent_seats(
    hall_id: UUID,
    seat_id: str,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    return AdjacentSeats(seat_id=seat_id, adjacent=cinema.halls.adjacent_seats(db, hall_id, seat_id))


# ---------------------------------------------------------------------------
# Hall schedule
# ---------------------------------------------------------------------------


@router.get("/{hall_id}/schedule", response_model=List[ScheduleSchema])
def get_hall_schedule(
    hall_id: UUID,
    upcoming: bool = True,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """Active schedules in the hall by start time. `upcoming=false` includes ones already started."""
    cinema.halls.get_hall(db, hall_id)
    return cinema.schedules.list_schedules(hall_id=hall_id, upcoming=upcoming)
