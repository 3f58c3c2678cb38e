from typing import Optional
from pydantic import BaseModel, UUID4, Field
from decimal import Decimal
from datetime import datetime


class ReservationCreate(BaseModel):
    schedule_id: UUID4
    seat_id: str = Field(..., min_length=2, max_length=10)  # e.g. "A1"


class Reservation(BaseModel):
    id: UUID4
    student_id: UUID4
    schedule_id: UUID4
    seat_id: str
    price: Decimal
    status: str  # confirmed, cancelled
    reservation_time: datetime
    cancelled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReservationCancelResponse(BaseModel):
    id: UUID4
    status: str
    cancelled_at: Optional[datetime] = None
