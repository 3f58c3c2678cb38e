
from campus_cinema.schemas.common import PaginatedResponse, ErrorResponse, HallConflictError
from campus_cinema.schemas.student import Student, StudentCreate, AdminCreate, StudentSummary, Token, TokenPayload
from campus_cinema.schemas.movie import Movie, MovieCreate, MovieUpdate
from campus_cinema.schemas.hall import (
    Hall, HallCreate, HallUpdate,
    Seat, SeatList, SeatingChart, AdjacentSeats,
)
from campus_cinema.schemas.schedule import (
    Schedule, ScheduleCreate, ScheduleUpdate, ReservedSeats, BestSeats,
)
from campus_cinema.schemas.reservation import Reservation, ReservationCreate, ReservationCancelResponse
