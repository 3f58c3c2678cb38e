from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from campus_cinema.api.deps import get_cinema, get_current_student
from campus_cinema.models.student import Student
from campus_cinema.services.cinema import Cinema
from campus_cinema.schemas.reservation import (
    Reservation as ReservationSchema,
    ReservationCreate,
    ReservationCancelResponse,
)
from campus_cinema.schemas.common import PaginatedResponse, paginate

router = APIRouter(prefix="/reservations", tags=["Reservations"])


def _own_reservation_or_404(reservation_id: UUID, student: Student, cinema: Cinema):
    reservation = cinema.booking.find_reservation(reservation_id)
    if not reservation or reservation.student_id != student.id:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


# ---------------------------------------------------------------------------
# POST /reservations: book one seat for a showing
# ---------------------------------------------------------------------------


@router.post("/", response_model=ReservationSchema, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    cinema: Cinema = Depends(get_cinema),
    current_student: Student = Depends(get_current_student),
):
    """
    Reserve a seat for the authenticated student.
    - 409 `seat_already_reserved` if someone holds the seat for this showing.
    - 404 `schedule_not_found` if the showing is missing or inactive.
    - 409 `seat_reservation_failed` if the seat is not part of the hall.
    """
    return cinema.booking.book(current_student.id, data.schedule_id, data.seat_id.upper())


# ---------------------------------------------------------------------------
# GET /reservations: current student's reservations
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[ReservationSchema])
def list_my_reservations(
    status: Optional[str] = Query(None, description="Filter by status: confirmed, cancelled"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    cinema: Cinema = Depends(get_cinema),
    current_student: Student = Depends(get_current_student),
):
    """Return the authenticated student's reservations, newest first."""
    records = cinema.booking.reservations_for_student(current_student.id)
    if status:
        records = [r for r in records if r.status == status]
    return PaginatedResponse(**paginate(records, page, limit))


@router.get("/{reservation_id}", response_model=ReservationSchema)
def get_reservation(
    reservation_id: UUID,
    cinema: Cinema = Depends(get_cinema),
    current_student: Student = Depends(get_current_student),
):
    return _own_reservation_or_404(reservation_id, current_student, cinema)


# ---------------------------------------------------------------------------
# PATCH /reservations/{id}/cancel
# ---------------------------------------------------------------------------


@router.patch("/{reservation_id}/cancel", response_model=ReservationCancelResponse)
def cancel_reservation(
    reservation_id: UUID,
    cinema: Cinema = Depends(get_cinema),
    current_student: Student = Depends(get_current_student),
):
    """Cancel a confirmed reservation; the seat becomes bookable again."""
    reservation = _own_reservation_or_404(reservation_id, current_student, cinema)
    if not cinema.booking.cancel(reservation_id):
        raise HTTPException(
            status_code=409,
            detail=f"Only confirmed reservations can be cancelled (current status: '{reservation.status}')",
        )
    return cinema.booking.find_reservation(reservation_id)
