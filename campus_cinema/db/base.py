from campus_cinema.db.session import Base
from campus_cinema.models.student import Student
from campus_cinema.models.movie import Movie
from campus_cinema.models.hall import Hall
from campus_cinema.models.schedule import MovieSchedule
from campus_cinema.models.reservation import Reservation
