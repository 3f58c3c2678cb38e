import uuid

import pytest

from campus_cinema.core.errors import InvalidReference, NotFound
from campus_cinema.services.seat_graph import EMPTY_CELL, HallSeatGraph, Seat
from campus_cinema.services.seat_layout import plan


@pytest.fixture
def graph():
    return HallSeatGraph()


@pytest.fixture
def small_hall(graph):
    hall_id = uuid.uuid4()
    graph.populate_hall(hall_id, plan(25))
    return hall_id


@pytest.fixture
def aisle_hall(graph):
    hall_id = uuid.uuid4()
    graph.populate_hall(hall_id, plan(75))
    return hall_id


def test_populate_registers_every_seat(graph, small_hall):
    assert graph.has_hall(small_hall)
    assert len(graph.get_seats_in_hall(small_hall)) == 25


def test_corner_and_center_adjacency(graph, small_hall):
    assert graph.get_adjacent_seats(small_hall, "A1") == {"A2", "B1", "B2"}
    assert len(graph.get_adjacent_seats(small_hall, "C3")) == 8


def test_adjacency_is_symmetric(graph, small_hall):
    for seat in graph.get_seats_in_hall(small_hall):
        for other in graph.get_adjacent_seats(small_hall, seat.seat_id):
            assert seat.seat_id in graph.get_adjacent_seats(small_hall, other)


def test_seats_across_the_aisle_are_not_adjacent(graph, aisle_hall):
    assert "C8" not in graph.get_adjacent_seats(aisle_hall, "C6")
    assert graph.get_seat(aisle_hall, "C7") is None


def test_unknown_seat_adjacency_raises(graph, small_hall):
    with pytest.raises(NotFound):
        graph.get_adjacent_seats(small_hall, "Z9")


def test_add_edge_with_unknown_endpoint_raises(graph, small_hall):
    with pytest.raises(InvalidReference):
        graph.add_edge(small_hall, "A1", "Z9")


def test_add_seat_and_edge(graph):
    hall_id = uuid.uuid4()
    graph.add_seat(Seat("A1", hall_id, 0, 0, "standard"))
    graph.add_seat(Seat("A2", hall_id, 0, 1, "standard"))
    graph.add_edge(hall_id, "A1", "A2")

    assert graph.get_adjacent_seats(hall_id, "A2") == {"A1"}


def test_reservation_is_per_schedule(graph, small_hall):
    first, second = uuid.uuid4(), uuid.uuid4()

    assert graph.reserve_seat(small_hall, "A1", first)
    assert not graph.reserve_seat(small_hall, "A1", first)
    assert graph.reserve_seat(small_hall, "A1", second)


def test_reserve_unknown_seat_fails(graph, small_hall):
    assert not graph.reserve_seat(small_hall, "Z9", uuid.uuid4())


def test_cancel_reservation(graph, small_hall):
    schedule_id = uuid.uuid4()
    graph.reserve_seat(small_hall, "B2", schedule_id)

    assert graph.cancel_reservation(small_hall, "B2", schedule_id)
    assert not graph.cancel_reservation(small_hall, "B2", schedule_id)
    assert graph.reserve_seat(small_hall, "B2", schedule_id)


def test_available_and_reserved_partition_the_hall(graph, small_hall):
    schedule_id = uuid.uuid4()
    for seat_id in ("A1", "C3", "E5"):
        graph.reserve_seat(small_hall, seat_id, schedule_id)

    available = {s.seat_id for s in graph.get_available_seats(small_hall, schedule_id)}
    reserved = {s.seat_id for s in graph.get_reserved_seats(small_hall, schedule_id)}
    everything = {s.seat_id for s in graph.get_seats_in_hall(small_hall)}

    assert reserved == {"A1", "C3", "E5"}
    assert available.isdisjoint(reserved)
    assert available | reserved == everything


def test_best_adjacent_seats_skips_broken_rows(graph, small_hall):
    schedule_id = uuid.uuid4()
    graph.reserve_seat(small_hall, "A3", schedule_id)

    best = graph.find_best_adjacent_seats(small_hall, 3, schedule_id)

    assert [s.seat_id for s in best] == ["B1", "B2", "B3"]


def test_best_adjacent_seats_does_not_span_the_aisle(graph, aisle_hall):
    best = graph.find_best_adjacent_seats(aisle_hall, 6, uuid.uuid4())

    assert [s.seat_id for s in best] == ["B1", "B2", "B3", "B4", "B5", "B6"]


def test_best_adjacent_seats_edge_cases(graph, small_hall):
    schedule_id = uuid.uuid4()

    assert graph.find_best_adjacent_seats(small_hall, 0, schedule_id) == []
    assert graph.find_best_adjacent_seats(small_hall, 6, schedule_id) == []
    assert [s.seat_id for s in graph.find_best_adjacent_seats(small_hall, 1, schedule_id)] == ["A1"]


def test_seating_chart_marks(graph, small_hall):
    schedule_id = uuid.uuid4()
    graph.reserve_seat(small_hall, "A1", schedule_id)

    chart = graph.generate_seating_chart(small_hall, schedule_id)

    assert len(chart) == 5 and all(len(row) == 5 for row in chart)
    assert chart[0][0] == "A1X"
    assert chart[0][1] == "A2O"
    # Other showings see the seat as free
    assert graph.generate_seating_chart(small_hall, uuid.uuid4())[0][0] == "A1O"


def test_seating_chart_shows_the_aisle_as_blank(graph, aisle_hall):
    chart = graph.generate_seating_chart(aisle_hall)

    assert chart[2][6] == EMPTY_CELL


def test_seating_chart_of_unknown_hall_is_empty(graph):
    assert graph.generate_seating_chart(uuid.uuid4()) == []


def test_remove_hall(graph, small_hall):
    assert graph.remove_hall(small_hall) == 25
    assert not graph.has_hall(small_hall)
    assert graph.get_seats_in_hall(small_hall) == []


def test_release_schedule_drops_only_that_showing(graph, small_hall):
    morning, evening = uuid.uuid4(), uuid.uuid4()
    graph.reserve_seat(small_hall, "A1", morning)
    graph.reserve_seat(small_hall, "A2", morning)
    graph.reserve_seat(small_hall, "A1", evening)

    assert graph.release_schedule(small_hall, morning) == 2
    assert graph.get_seat(small_hall, "A1").reserved_for == {evening}
    assert graph.get_seat(small_hall, "A2").reserved_for == set()
    assert graph.release_schedule(small_hall, morning) == 0
