import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Uuid, func
from sqlalchemy.orm import relationship
from campus_cinema.db.session import Base

class Hall(Base):
    __tablename__ = "halls"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    location = Column(String(255), nullable=True)
    screen_type = Column(String(50), nullable=True) # standard, IMAX, VIP
    seating_layout = Column(String(255), nullable=True) # e.g. "Rows:8,Seats:13,CenterAisle:true"
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    schedules = relationship("MovieSchedule", back_populates="hall")
