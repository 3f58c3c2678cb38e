from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import configure_mappers
from sqlalchemy.schema import CreateIndex

from campus_cinema.db.base import Base
from campus_cinema.models.reservation import Reservation


def test_mappers_configure():
    configure_mappers()
    assert {"students", "movies", "halls", "movie_schedules", "reservations"} <= set(Base.metadata.tables)


def test_confirmed_seat_index_is_partial_on_postgres():
    index = next(i for i in Reservation.__table__.indexes if i.name == "uq_reservations_confirmed_seat")
    ddl = str(CreateIndex(index).compile(dialect=postgresql.dialect()))

    assert index.unique
    assert "WHERE status = 'confirmed'" in ddl
