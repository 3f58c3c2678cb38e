import uuid
from sqlalchemy import Column, String, DateTime, DECIMAL, ForeignKey, Index, Uuid, func, text
from sqlalchemy.orm import relationship
from campus_cinema.db.session import Base

CONFIRMED = "confirmed"
CANCELLED = "cancelled"


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    schedule_id = Column(Uuid(as_uuid=True), ForeignKey("movie_schedules.id"), nullable=False, index=True)
    seat_id = Column(String(10), nullable=False) # seat label, e.g. "A1"
    price = Column(DECIMAL(10, 2), nullable=False)
    status = Column(String(20), default=CONFIRMED, nullable=False, index=True) # confirmed, cancelled
    reservation_time = Column(DateTime, nullable=False, index=True)
    cancelled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    student = relationship("Student")
    schedule = relationship("MovieSchedule", back_populates="reservations")

    __table_args__ = (
        # At most one confirmed reservation per seat and showing
        Index(
            "uq_reservations_confirmed_seat",
            "schedule_id",
            "seat_id",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
    )
