"""
Error taxonomy for the booking core.

Seat-graph and layout queries answer with booleans or empty results; the
errors below are raised where callers have to branch on the reason
(seat taken, hall busy, entity missing, store down).
"""


class CinemaError(Exception):
    """Base class. ``code`` is the machine-readable reason sent to clients."""

    code = "cinema_error"
    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFound(CinemaError):
    code = "not_found"
    status_code = 404


class ScheduleNotFound(NotFound):
    code = "schedule_not_found"


class InvalidReference(CinemaError):
    code = "invalid_reference"
    status_code = 400


class HallConflict(CinemaError):
    code = "hall_conflict"
    status_code = 409

    def __init__(self, message: str, conflicting_schedule_id=None) -> None:
        super().__init__(message)
        self.conflicting_schedule_id = conflicting_schedule_id


class SeatAlreadyReserved(CinemaError):
    code = "seat_already_reserved"
    status_code = 409


class SeatReservationFailed(CinemaError):
    code = "seat_reservation_failed"
    status_code = 409


class PersistenceFailure(CinemaError):
    code = "persistence_failure"
    status_code = 503
