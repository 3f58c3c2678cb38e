from uuid import UUID
from typing import Optional
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from campus_cinema.api.deps import get_cinema, get_current_admin
from campus_cinema.models.student import Student
from campus_cinema.models.reservation import CONFIRMED, CANCELLED
from campus_cinema.services.cinema import Cinema
from campus_cinema.schemas.reservation import Reservation as ReservationSchema, ReservationCancelResponse
from campus_cinema.schemas.common import PaginatedResponse, paginate
from campus_cinema.utils.times import to_naive_local

router = APIRouter(prefix="/admin/reservations", tags=["Admin - Reservations"])


@router.get("/", response_model=PaginatedResponse[ReservationSchema])
def list_reservations(
    status: Optional[str] = Query(None, description="Filter by status: confirmed, cancelled"),
    schedule_id: Optional[UUID] = None,
    made_from: Optional[datetime] = Query(None, description="Reservation time lower bound"),
    made_to: Optional[datetime] = Query(None, description="Reservation time upper bound"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """All reservations, newest first, or oldest first when a time window is given."""
    if status and status not in (CONFIRMED, CANCELLED):
        raise HTTPException(status_code=400, detail=f"Unknown status '{status}'")

    made_from, made_to = to_naive_local(made_from), to_naive_local(made_to)
    if made_from or made_to:
        records = cinema.booking.reservations_in_range(made_from or datetime.min, made_to or datetime.max)
        if status:
            records = [r for r in records if r.status == status]
        if schedule_id:
            records = [r for r in records if r.schedule_id == schedule_id]
    else:
        records = cinema.booking.list_reservations(status=status, schedule_id=schedule_id)
    return PaginatedResponse(**paginate(records, page, limit))


@router.patch("/{reservation_id}/cancel", response_model=ReservationCancelResponse)
def cancel_reservation(
    reservation_id: UUID,
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """Cancel any student's confirmed reservation and release the seat."""
    reservation = cinema.booking.find_reservation(reservation_id)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    if not cinema.booking.cancel(reservation_id):
        raise HTTPException(
            status_code=409,
            detail="Only confirmed reservations can be cancelled",
        )
    return cinema.booking.find_reservation(reservation_id)
