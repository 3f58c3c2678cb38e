from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from campus_cinema.core.config import settings
from campus_cinema.core.security import decode_token
from campus_cinema.db.session import get_db
from campus_cinema.models.student import Student
from campus_cinema.services.cinema import Cinema

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def get_cinema(request: Request) -> Cinema:
    return request.app.state.cinema


def get_current_student(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Student:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = decode_token(token)
    if payload is None:
        raise credentials_exception
    try:
        student_id = UUID(payload.sub)
    except ValueError:
        raise credentials_exception

    student = db.get(Student, student_id)
    if student is None:
        raise credentials_exception
    if not student.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")
    return student


def get_current_admin(current_student: Student = Depends(get_current_student)) -> Student:
    if current_student.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_student
