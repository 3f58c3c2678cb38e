from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_cinema.db.session import get_db
from campus_cinema.api.deps import get_cinema, get_current_admin
from campus_cinema.models.student import Student
from campus_cinema.services.cinema import Cinema
from campus_cinema.schemas.schedule import (
    Schedule as ScheduleSchema,
    ScheduleCreate,
    ScheduleUpdate,
)

router = APIRouter(prefix="/admin/schedules", tags=["Admin - Schedules"])


@router.post("/", response_model=ScheduleSchema, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ScheduleCreate,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """
    Schedule a movie in a hall.
    - The end time is the start time plus the movie's duration.
    - Returns 409 if another active schedule in the hall touches the interval.
    """
    return cinema.schedules.create_schedule(
        db,
        movie_id=data.movie_id,
        hall_id=data.hall_id,
        start_time=data.start_time,
        price=data.price,
    )


@router.patch("/{schedule_id}", response_model=ScheduleSchema)
def update_schedule(
    schedule_id: UUID,
    data: ScheduleUpdate,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    schedule = cinema.schedules.get_schedule(db, schedule_id, active_only=False)
    return cinema.schedules.update_schedule(db, schedule, **data.model_dump(exclude_unset=True))


@router.delete("/{schedule_id}", response_model=ScheduleSchema)
def delete_schedule(
    schedule_id: UUID,
    db: Session = Depends(get_db),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """Deactivates the schedule. Its reservations are kept."""
    schedule = cinema.schedules.get_schedule(db, schedule_id, active_only=False)
    return cinema.schedules.deactivate_schedule(db, schedule)
