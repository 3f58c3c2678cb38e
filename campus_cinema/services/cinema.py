import logging

from campus_cinema.services.booking import BookingCoordinator
from campus_cinema.services.caches import ReservationCache, ScheduleIndex, StudentDirectory
from campus_cinema.services.halls import HallService
from campus_cinema.services.locks import KeyedLocks
from campus_cinema.services.schedules import ScheduleService
from campus_cinema.services.seat_graph import HallSeatGraph

logger = logging.getLogger(__name__)


class Cinema:
    """
    Wires the booking core together around one session factory.

    Built once per application (see ``main.lifespan``) and shared through
    ``app.state.cinema``; tests build their own against a scratch database.
    """

    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory
        self.graph = HallSeatGraph()
        self.locks = KeyedLocks()

        self.students = StudentDirectory(session_factory)
        self.schedule_index = ScheduleIndex(session_factory)
        self.reservations = ReservationCache(session_factory)

        self.halls = HallService(self.graph, self.locks, self.schedule_index)
        self.schedules = ScheduleService(self.locks, self.schedule_index, self.halls)
        self.booking = BookingCoordinator(
            session_factory,
            self.graph,
            self.locks,
            self.reservations,
            self.students,
            self.halls,
        )

    def start(self) -> None:
        """Fill the caches and the seat graph from the database."""
        students = self.students.load()
        schedules = self.schedule_index.load()
        reservations = self.reservations.load()
        with self.session_factory() as db:
            halls = self.halls.hydrate(db)
        logger.info(
            "Cinema ready: %d students, %d schedules, %d reservations, %d halls",
            students, schedules, reservations, halls,
        )
