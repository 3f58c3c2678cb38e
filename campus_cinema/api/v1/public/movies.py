from uuid import UUID
from typing import List, Optional
from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from campus_cinema.db.session import get_db
from campus_cinema.models.movie import Movie
from campus_cinema.schemas.movie import Movie as MovieSchema
from campus_cinema.schemas.common import PaginatedResponse

router = APIRouter(prefix="/movies", tags=["Movies"])


@router.get("/", response_model=PaginatedResponse[MovieSchema])
def list_movies(
    title: Optional[str] = Query(None, description="Case-insensitive title search"),
    genre: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = db.query(Movie).filter(Movie.is_active == True)  # noqa: E712

    if title:
        query = query.filter(Movie.title.ilike(f"%{title}%"))
    if genre:
        query = query.filter(Movie.genre.ilike(genre))

    total = query.count()
    movies = query.order_by(Movie.title).offset((page - 1) * limit).limit(limit).all()

    return PaginatedResponse(
        data=movies,
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@router.get("/upcoming", response_model=List[MovieSchema])
def upcoming_movies(db: Session = Depends(get_db)):
    """Movies with a release date after today, soonest first."""
    return (
        db.query(Movie)
        .filter(Movie.is_active == True, Movie.release_date > date.today())  # noqa: E712
        .order_by(Movie.release_date)
        .all()
    )


@router.get("/recent", response_model=List[MovieSchema])
def recent_movies(
    days: int = Query(30, ge=1, le=365, description="Look-back window in days"),
    db: Session = Depends(get_db),
):
    """Movies released within the last `days` days, newest first."""
    today = date.today()
    return (
        db.query(Movie)
        .filter(
            Movie.is_active == True,  # noqa: E712
            Movie.release_date >= today - timedelta(days=days),
            Movie.release_date <= today,
        )
        .order_by(Movie.release_date.desc())
        .all()
    )


@router.get("/{movie_id}", response_model=MovieSchema)
def get_movie(movie_id: UUID, db: Session = Depends(get_db)):
    movie = db.query(Movie).filter(Movie.id == movie_id, Movie.is_active == True).first()  # noqa: E712
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie
