from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from campus_cinema.api.deps import get_cinema, get_current_admin
from campus_cinema.models.student import Student
from campus_cinema.services.cinema import Cinema
from campus_cinema.schemas.student import Student as StudentSchema, StudentSummary
from campus_cinema.schemas.common import PaginatedResponse, paginate

router = APIRouter(prefix="/admin/students", tags=["Admin - Students"])


@router.get("/", response_model=PaginatedResponse[StudentSummary])
def list_students(
    search: Optional[str] = Query(None, description="Case-insensitive name search"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    """Registered students ordered by name, served from the student directory."""
    students = cinema.students.all()
    if search:
        needle = search.lower()
        students = [s for s in students if needle in s.full_name.lower()]
    return PaginatedResponse(**paginate(students, page, limit))


@router.get("/{student_id}", response_model=StudentSchema)
def get_student(
    student_id: UUID,
    cinema: Cinema = Depends(get_cinema),
    current_user: Student = Depends(get_current_admin),
):
    student = cinema.students.get(student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student
