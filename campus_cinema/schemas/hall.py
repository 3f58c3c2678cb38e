from typing import Optional, List
from pydantic import BaseModel, UUID4, Field
from datetime import datetime


# Hall Schemas
class HallBase(BaseModel):
    name: str
    capacity: int = Field(..., gt=0)  # snapped to the closest standard size
    location: Optional[str] = None
    screen_type: Optional[str] = None  # standard, IMAX, VIP


class HallCreate(HallBase):
    pass


class HallUpdate(BaseModel):
    name: Optional[str] = None
    capacity: Optional[int] = Field(None, gt=0)
    location: Optional[str] = None
    screen_type: Optional[str] = None


class Hall(HallBase):
    id: UUID4
    seating_layout: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Seat Schemas (in-memory seat graph)
class Seat(BaseModel):
    seat_id: str
    row: int
    column: int
    tier: str  # standard, premium, accessible
    is_reserved: bool = False


class SeatList(BaseModel):
    hall_id: UUID4
    schedule_id: Optional[UUID4] = None
    total: int
    available: int
    seats: List[Seat]


class SeatingChart(BaseModel):
    hall_id: UUID4
    schedule_id: Optional[UUID4] = None
    chart: List[List[str]]


class AdjacentSeats(BaseModel):
    seat_id: str
    adjacent: List[str]


def seat_list(hall_id, seats, schedule_id=None) -> SeatList:
    """Build a SeatList from seat-graph seats, flagging those taken for ``schedule_id``."""
    out = [
        Seat(
            seat_id=s.seat_id,
            row=s.row,
            column=s.column,
            tier=s.tier,
            is_reserved=s.is_reserved(schedule_id),
        )
        for s in seats
    ]
    return SeatList(
        hall_id=hall_id,
        schedule_id=schedule_id,
        total=len(out),
        available=sum(1 for s in out if not s.is_reserved),
        seats=out,
    )
