import uuid
from sqlalchemy import Column, String, Boolean, Date, DateTime, Integer, Text, Uuid, func
from campus_cinema.db.session import Base

class Movie(Base):
    __tablename__ = "movies"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False)
    release_date = Column(Date, nullable=True, index=True)
    genre = Column(String(50), nullable=True, index=True)
    director = Column(String(255), nullable=True)
    rating = Column(String(10), nullable=True) # G, PG, PG-13, R
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
