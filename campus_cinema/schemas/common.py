from typing import List, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper: used by all list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Body of every booking-core error (see main.cinema_error_handler)
class ErrorResponse(BaseModel):
    error: str
    message: str


class HallConflictError(ErrorResponse):
    conflicting_schedule_id: str


def paginate(items: list, page: int, limit: int) -> dict:
    """Slice an in-memory, already ordered list into PaginatedResponse fields."""
    total = len(items)
    start = (page - 1) * limit
    return dict(
        data=items[start:start + limit],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )
