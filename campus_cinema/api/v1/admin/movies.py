import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from campus_cinema.db.session import get_db
from campus_cinema.db.transactions import commit_or_raise
from campus_cinema.api.deps import get_current_admin
from campus_cinema.models.student import Student
from campus_cinema.models.movie import Movie
from campus_cinema.schemas.movie import Movie as MovieSchema, MovieCreate, MovieUpdate
from campus_cinema.schemas.common import PaginatedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/movies", tags=["Admin - Movies"])


def _get_movie_or_404(movie_id: UUID, db: Session) -> Movie:
    movie = db.query(Movie).filter(Movie.id == movie_id).first()
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie


@router.post("/", response_model=MovieSchema, status_code=status.HTTP_201_CREATED)
def create_movie(
    data: MovieCreate,
    db: Session = Depends(get_db),
    current_user: Student = Depends(get_current_admin),
):
    movie = Movie(**data.model_dump())
    db.add(movie)
    commit_or_raise(db, "save movie")
    db.refresh(movie)
    logger.info("Movie saved with ID: %s", movie.id)
    return movie


@router.get("/", response_model=PaginatedResponse[MovieSchema])
def list_movies(
    include_inactive: bool = False,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: Student = Depends(get_current_admin),
):
    query = db.query(Movie)
    if not include_inactive:
        query = query.filter(Movie.is_active == True)  # noqa: E712

    total = query.count()
    movies = query.order_by(Movie.title).offset((page - 1) * limit).limit(limit).all()

    return PaginatedResponse(
        data=movies,
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@router.get("/{movie_id}", response_model=MovieSchema)
def get_movie(
    movie_id: UUID,
    db: Session = Depends(get_db),
    current_user: Student = Depends(get_current_admin),
):
    return _get_movie_or_404(movie_id, db)


@router.patch("/{movie_id}", response_model=MovieSchema)
def update_movie(
    movie_id: UUID,
    data: MovieUpdate,
    db: Session = Depends(get_db),
    current_user: Student = Depends(get_current_admin),
):
    """Schedules already created keep the end time computed from the old duration."""
    movie = _get_movie_or_404(movie_id, db)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(movie, field, value)
    commit_or_raise(db, "update movie")
    db.refresh(movie)
    return movie


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_movie(
    movie_id: UUID,
    db: Session = Depends(get_db),
    current_user: Student = Depends(get_current_admin),
):
    """Soft delete: the movie disappears from listings, past reservations keep their link."""
    movie = _get_movie_or_404(movie_id, db)
    movie.is_active = False
    commit_or_raise(db, "delete movie")
