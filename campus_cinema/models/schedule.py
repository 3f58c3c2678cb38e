import uuid
from sqlalchemy import Column, Boolean, DateTime, DECIMAL, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from campus_cinema.db.session import Base

class MovieSchedule(Base):
    __tablename__ = "movie_schedules"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    movie_id = Column(Uuid(as_uuid=True), ForeignKey("movies.id"), nullable=False, index=True)
    hall_id = Column(Uuid(as_uuid=True), ForeignKey("halls.id"), nullable=False, index=True)
    # Naive local times, like the screening times printed on a ticket
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    movie = relationship("Movie")
    hall = relationship("Hall", back_populates="schedules")
    reservations = relationship("Reservation", back_populates="schedule")
