from typing import Optional
from pydantic import BaseModel, UUID4, Field
from datetime import date, datetime


class MovieBase(BaseModel):
    title: str
    description: Optional[str] = None
    duration_minutes: int = Field(..., gt=0)
    release_date: Optional[date] = None
    genre: Optional[str] = None
    director: Optional[str] = None
    rating: Optional[str] = None  # G, PG, PG-13, R


class MovieCreate(MovieBase):
    pass


class MovieUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    release_date: Optional[date] = None
    genre: Optional[str] = None
    director: Optional[str] = None
    rating: Optional[str] = None
    is_active: Optional[bool] = None


class Movie(MovieBase):
    id: UUID4
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
