import logging

import pytest

from campus_cinema.services import seat_layout
from campus_cinema.services.seat_layout import (
    ACCESSIBLE,
    PREMIUM,
    SEAT_TIERS,
    STANDARD_CAPACITIES,
    closest_bucket,
    generate,
    plan,
    seat_label,
)


@pytest.mark.parametrize("capacity", STANDARD_CAPACITIES)
def test_standard_capacity_generates_exactly_that_many_unique_seats(capacity):
    positions = generate(capacity)

    assert len(positions) == capacity
    assert len({(p.row, p.column) for p in positions}) == capacity
    assert len({p.seat_id for p in positions}) == capacity


@pytest.mark.parametrize("capacity", STANDARD_CAPACITIES)
def test_every_bucket_has_four_accessible_corner_seats(capacity):
    positions = generate(capacity)

    assert all(p.tier in SEAT_TIERS for p in positions)
    assert sum(1 for p in positions if p.tier == ACCESSIBLE) == 4


def test_small_hall_tiers():
    tiers = {p.seat_id: p.tier for p in generate(25)}

    assert {s for s, t in tiers.items() if t == ACCESSIBLE} == {"A1", "A5", "E1", "E5"}
    assert {s for s, t in tiers.items() if t == PREMIUM} == {"C2", "C3", "C4"}


def test_layout_is_deterministic():
    assert plan(150) == plan(150)
    assert generate(200) == generate(200)


def test_center_aisle_leaves_middle_column_empty():
    layout = plan(75)

    assert layout.center_aisle
    middle = layout.max_seats_per_row // 2
    assert all(p.column != middle for p in layout.positions)


def test_halls_from_100_seats_have_a_narrower_front_row():
    positions = generate(100)
    per_row = {}
    for p in positions:
        per_row[p.row] = per_row.get(p.row, 0) + 1

    assert per_row[0] < per_row[1] < per_row[4]


def test_summary_string():
    assert plan(100).summary == "Rows:8,Seats:13,CenterAisle:true"
    assert plan(150).summary == "Rows:10,Seats:16"


@pytest.mark.parametrize(
    "requested, expected",
    [(25, 25), (30, 25), (40, 50), (60, 50), (90, 100), (125, 100), (175, 150), (500, 200), (1, 25)],
)
def test_closest_bucket(requested, expected):
    assert closest_bucket(requested).capacity == expected


def test_tie_goes_to_first_bucket():
    # 125 is 25 away from both 100 and 150
    assert closest_bucket(125).capacity == 100
    assert closest_bucket(175).capacity == 150


def test_non_standard_capacity_is_trimmed_to_request():
    positions = generate(40)

    assert len(positions) == 40
    assert len({p.seat_id for p in positions}) == 40


def test_capacity_larger_than_bucket_warns(caplog):
    with caplog.at_level(logging.WARNING, logger=seat_layout.__name__):
        positions = generate(60)

    assert len(positions) == 50
    assert "Generated 50 seats but target capacity was 60" in caplog.text


def test_non_positive_capacity_is_rejected():
    with pytest.raises(ValueError):
        plan(0)


def test_seat_label():
    assert seat_label(0, 0) == "A1"
    assert seat_label(2, 11) == "C12"
