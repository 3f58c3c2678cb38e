"""
Shared fixtures.

The application reads its settings at import time, so the database URL is
pointed at a scratch SQLite file before anything from campus_cinema loads.
Store-backed unit tests get their own database per test under tmp_path.
"""
import os
import tempfile
from datetime import date, datetime, timedelta
from decimal import Decimal

_SCRATCH_DIR = tempfile.mkdtemp(prefix="campus_cinema_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_SCRATCH_DIR, 'api.db')}"
os.environ["SCHEDULE_CLEANUP_INTERVAL_SECONDS"] = "0"
os.environ.setdefault("ADMIN_SECRET_KEY", "test-admin-secret")

import pytest
from sqlalchemy.orm import sessionmaker

from campus_cinema.db.base import Base
from campus_cinema.db.session import build_engine
from campus_cinema.models.hall import Hall
from campus_cinema.models.movie import Movie
from campus_cinema.models.student import Student
from campus_cinema.services.cinema import Cinema


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'cinema.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def cinema(session_factory):
    cinema = Cinema(session_factory)
    cinema.start()
    return cinema


@pytest.fixture
def student(db, cinema):
    row = Student(
        full_name="Ada Lovelace",
        email="ada@campus.edu",
        student_number="S-0001",
        password_hash="not-a-real-hash",
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def other_student(db, cinema):
    row = Student(
        full_name="Alan Turing",
        email="alan@campus.edu",
        student_number="S-0002",
        password_hash="not-a-real-hash",
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def movie(db):
    row = Movie(
        title="Metropolis",
        duration_minutes=120,
        release_date=date(1927, 1, 10),
        genre="Sci-Fi",
        rating="PG",
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def hall(db, cinema) -> Hall:
    return cinema.halls.create_hall(db, name="Hall A", capacity=25)


@pytest.fixture
def showtime():
    """Tomorrow at 10:00, well clear of the past-schedule cleanup."""
    tomorrow = date.today() + timedelta(days=1)
    return datetime(tomorrow.year, tomorrow.month, tomorrow.day, 10, 0)


@pytest.fixture
def schedule(db, cinema, movie, hall, showtime):
    return cinema.schedules.create_schedule(
        db, movie_id=movie.id, hall_id=hall.id, start_time=showtime, price=Decimal("9.50")
    )
