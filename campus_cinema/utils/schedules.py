from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from campus_cinema.models.schedule import MovieSchedule


def deactivate_past_schedules(db: Session, now: Optional[datetime] = None) -> List[UUID]:
    """
    Mark as inactive every active schedule whose end time has already passed.

    Times are stored as naive local values, so ``now`` is local time too.
    Returns the ids of the schedules deactivated.
    """
    now = now or datetime.now()

    past = (
        db.query(MovieSchedule)
        .filter(
            MovieSchedule.is_active == True,  # noqa: E712
            MovieSchedule.end_time < now,
        )
        .all()
    )
    if not past:
        return []

    for schedule in past:
        schedule.is_active = False
    db.commit()
    return [s.id for s in past]
