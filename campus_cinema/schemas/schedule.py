from typing import Optional, List
from pydantic import BaseModel, UUID4, Field, field_validator
from decimal import Decimal
from datetime import datetime

from campus_cinema.utils.times import to_naive_local


class ScheduleCreate(BaseModel):
    movie_id: UUID4
    hall_id: UUID4
    start_time: datetime  # end time is derived from the movie duration
    price: Decimal = Field(..., ge=0)

    @field_validator("start_time")
    @classmethod
    def local_start_time(cls, v):
        return to_naive_local(v)


class ScheduleUpdate(BaseModel):
    movie_id: Optional[UUID4] = None
    hall_id: Optional[UUID4] = None
    start_time: Optional[datetime] = None
    price: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("start_time")
    @classmethod
    def local_start_time(cls, v):
        return to_naive_local(v)


class Schedule(BaseModel):
    id: UUID4
    movie_id: UUID4
    hall_id: UUID4
    start_time: datetime
    end_time: datetime
    price: Decimal
    is_active: bool = True

    class Config:
        from_attributes = True


class ReservedSeats(BaseModel):
    schedule_id: UUID4
    seat_ids: List[str]


class BestSeats(BaseModel):
    schedule_id: UUID4
    count: int
    seat_ids: List[str]  # empty when no run of `count` free seats exists
