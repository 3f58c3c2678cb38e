from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from campus_cinema.core.errors import HallConflict
from campus_cinema.models.schedule import MovieSchedule


def find_conflict(
    db: Session,
    hall_id: UUID,
    start: datetime,
    end: datetime,
    exclude_schedule_id: Optional[UUID] = None,
) -> Optional[MovieSchedule]:
    """
    First active schedule in the hall whose interval touches [start, end].

    Endpoints are inclusive: a showing ending at 12:00 conflicts with one
    starting at 12:00.
    """
    filters = [
        MovieSchedule.hall_id == hall_id,
        MovieSchedule.is_active == True,  # noqa: E712
        MovieSchedule.start_time <= end,
        MovieSchedule.end_time >= start,
    ]
    if exclude_schedule_id:
        filters.append(MovieSchedule.id != exclude_schedule_id)

    return (
        db.query(MovieSchedule)
        .filter(*filters)
        .order_by(MovieSchedule.start_time)
        .first()
    )


def is_hall_available(
    db: Session,
    hall_id: UUID,
    start: datetime,
    end: datetime,
    exclude_schedule_id: Optional[UUID] = None,
) -> bool:
    return find_conflict(db, hall_id, start, end, exclude_schedule_id) is None


def ensure_hall_available(
    db: Session,
    hall_id: UUID,
    start: datetime,
    end: datetime,
    exclude_schedule_id: Optional[UUID] = None,
) -> None:
    """Raise HallConflict if the hall is busy at any point of [start, end]."""
    conflict = find_conflict(db, hall_id, start, end, exclude_schedule_id)
    if conflict:
        raise HallConflict(
            f"Hall is already occupied from {conflict.start_time} to {conflict.end_time} "
            f"(schedule {conflict.id})",
            conflicting_schedule_id=conflict.id,
        )
