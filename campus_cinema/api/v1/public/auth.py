from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from campus_cinema.db.session import get_db
from campus_cinema.db.transactions import commit_or_raise
from campus_cinema.core.config import settings
from campus_cinema.core.security import create_access_token, get_password_hash, verify_password

from campus_cinema.api.deps import get_cinema, get_current_student
from campus_cinema.models.student import Student
from campus_cinema.services.caches import StudentRecord, update_quietly
from campus_cinema.services.cinema import Cinema
from campus_cinema.schemas.student import StudentCreate, AdminCreate, Token, Student as StudentSchema

router = APIRouter(prefix="/auth", tags=["auth"])


def _build_token_response(student: Student) -> Token:
    access_token = create_access_token(subject=str(student.id), role=student.role)
    return Token(
        access_token=access_token,
        token_type="bearer",
        student=StudentSchema.model_validate(student),
    )


def _create_student(body: StudentCreate, role: str, db: Session, cinema: Cinema) -> Student:
    if db.query(Student).filter(Student.email == body.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    if db.query(Student).filter(Student.student_number == body.student_number).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Student number already registered",
        )
    student = Student(
        full_name=body.full_name,
        email=body.email,
        student_number=body.student_number,
        password_hash=get_password_hash(body.password),
        role=role,
    )
    db.add(student)
    commit_or_raise(db, "register student")
    db.refresh(student)
    update_quietly(cinema.students.put, StudentRecord.from_model(student))
    return student


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(body: StudentCreate, db: Session = Depends(get_db), cinema: Cinema = Depends(get_cinema)):
    student = _create_student(body, "student", db, cinema)
    return _build_token_response(student)


@router.post("/admin/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def admin_register(body: AdminCreate, db: Session = Depends(get_db), cinema: Cinema = Depends(get_cinema)):
    if body.admin_secret != settings.ADMIN_SECRET_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin secret",
        )
    student = _create_student(body, "admin", db, cinema)
    return _build_token_response(student)


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    student = db.query(Student).filter(Student.email == form_data.username).first()
    if not student or not verify_password(form_data.password, student.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not student.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return _build_token_response(student)


@router.get("/me", response_model=StudentSchema)
def get_me(current_student: Student = Depends(get_current_student)):
    """Return the authenticated student's profile."""
    return current_student
