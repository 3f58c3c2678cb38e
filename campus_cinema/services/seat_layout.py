"""
Seat layouts for cinema halls.

A hall's declared capacity is mapped to one of a handful of standard grids
(rows x seats-per-row, with or without a center aisle). Candidate positions
are ranked by their distance from the middle of the room and the best
``capacity`` of them are kept, so the same capacity always produces the
same seats and the same tiers.

Coordinates are 0-based grid cells. A seat's label is the row letter plus
the 1-based column number (row 0, column 0 is ``A1``). Columns are not
renumbered around the aisle, so a hall with a center aisle has a gap in its
seat numbers.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

STANDARD = "standard"
PREMIUM = "premium"
ACCESSIBLE = "accessible"
SEAT_TIERS = (STANDARD, PREMIUM, ACCESSIBLE)

# Halls below this size keep every row at full width
UNIFORM_ROWS_BELOW = 100
# Narrower rows are not split by the aisle
MIN_AISLE_ROW_WIDTH = 8


@dataclass(frozen=True)
class LayoutBucket:
    capacity: int
    rows: int
    max_seats_per_row: int
    center_aisle: bool
    # Explicit premium block, inclusive (first, last); None selects the proportional rule
    premium_rows: Optional[Tuple[int, int]] = None
    premium_columns: Optional[Tuple[int, int]] = None


STANDARD_LAYOUTS: Tuple[LayoutBucket, ...] = (
    LayoutBucket(25, 5, 5, False, premium_rows=(2, 2), premium_columns=(1, 3)),
    LayoutBucket(50, 5, 10, False, premium_rows=(1, 3), premium_columns=(3, 6)),
    LayoutBucket(75, 6, 13, True),
    LayoutBucket(100, 8, 13, True),
    LayoutBucket(150, 10, 16, False),
    LayoutBucket(200, 11, 19, True),
)

STANDARD_CAPACITIES = tuple(b.capacity for b in STANDARD_LAYOUTS)


def seat_label(row: int, column: int) -> str:
    return f"{chr(ord('A') + row)}{column + 1}"


@dataclass(frozen=True)
class SeatPosition:
    row: int
    column: int
    tier: str

    @property
    def seat_id(self) -> str:
        return seat_label(self.row, self.column)


@dataclass(frozen=True)
class HallLayout:
    bucket: LayoutBucket
    positions: Tuple[SeatPosition, ...]

    @property
    def rows(self) -> int:
        return self.bucket.rows

    @property
    def max_seats_per_row(self) -> int:
        return self.bucket.max_seats_per_row

    @property
    def center_aisle(self) -> bool:
        return self.bucket.center_aisle

    @property
    def summary(self) -> str:
        """Short description stored on the hall record."""
        text = f"Rows:{self.rows},Seats:{self.max_seats_per_row}"
        if self.center_aisle:
            text += ",CenterAisle:true"
        return text


def closest_bucket(capacity: int) -> LayoutBucket:
    """Exact match, else the numerically closest bucket (first one wins a tie)."""
    return min(STANDARD_LAYOUTS, key=lambda b: abs(capacity - b.capacity))


def standard_capacity(capacity: int) -> int:
    return closest_bucket(capacity).capacity


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _row_width(bucket: LayoutBucket, row: int) -> int:
    full = bucket.max_seats_per_row
    if bucket.capacity < UNIFORM_ROWS_BELOW:
        return full
    # Curved front: the first two rows are narrower
    if row == 0:
        return _round_half_up(full * 0.8)
    if row == 1:
        return _round_half_up(full * 0.9)
    return full


def _candidate_positions(bucket: LayoutBucket) -> Iterator[Tuple[int, int]]:
    middle = bucket.max_seats_per_row // 2
    for row in range(bucket.rows):
        width = _row_width(bucket, row)
        left_padding = (bucket.max_seats_per_row - width) // 2
        split = bucket.center_aisle and width >= MIN_AISLE_ROW_WIDTH
        for offset in range(width):
            column = left_padding + offset
            if split and column >= middle:
                column += 1
            yield row, column


def _priority(bucket: LayoutBucket, position: Tuple[int, int]) -> int:
    row, column = position
    row_distance = abs(row - bucket.rows // 2)
    column_distance = abs(column - bucket.max_seats_per_row // 2)
    return row_distance * 100 + column_distance


def _is_premium(bucket: LayoutBucket, row: int, column: int) -> bool:
    if bucket.premium_rows is not None:
        first_row, last_row = bucket.premium_rows
        first_col, last_col = bucket.premium_columns
        return first_row <= row <= last_row and first_col <= column <= last_col

    middle_start = bucket.rows // 3
    middle_end = 2 * bucket.rows // 3
    width = bucket.max_seats_per_row
    return middle_start <= row <= middle_end and width * 0.2 <= column <= width * 0.8


def plan(capacity: int) -> HallLayout:
    """Build the full layout (bucket + ranked, tiered positions) for a capacity."""
    if capacity <= 0:
        raise ValueError(f"capacity must be positive, got {capacity}")

    bucket = closest_bucket(capacity)
    if bucket.capacity != capacity:
        logger.info(
            "Using standard layout for capacity %d instead of requested %d",
            bucket.capacity,
            capacity,
        )

    # sorted() is stable: equal scores keep row-major generation order
    ranked = sorted(_candidate_positions(bucket), key=lambda p: _priority(bucket, p))
    kept = ranked[:capacity]

    if len(kept) != capacity:
        logger.warning(
            "Generated %d seats but target capacity was %d; this may indicate a layout issue",
            len(kept),
            capacity,
        )

    row_ends: Dict[int, Tuple[int, int]] = {}
    for row, column in kept:
        low, high = row_ends.get(row, (column, column))
        row_ends[row] = (min(low, column), max(high, column))
    edge_rows = {min(row_ends), max(row_ends)}

    positions: List[SeatPosition] = []
    for row, column in kept:
        tier = STANDARD
        if _is_premium(bucket, row, column):
            tier = PREMIUM
        if row in edge_rows and column in row_ends[row]:
            tier = ACCESSIBLE
        positions.append(SeatPosition(row, column, tier))

    return HallLayout(bucket=bucket, positions=tuple(positions))


def generate(capacity: int) -> List[SeatPosition]:
    """Ordered (best first) seat positions for a hall of ``capacity`` seats."""
    return list(plan(capacity).positions)


def neighbour_pairs(positions) -> Iterator[Tuple[SeatPosition, SeatPosition]]:
    """
    Every unordered pair of seats that touch horizontally, vertically or
    diagonally. Seats on either side of the aisle are not neighbours.
    """
    by_cell = {(p.row, p.column): p for p in positions}
    for (row, column), seat in by_cell.items():
        for d_row, d_col in ((0, 1), (1, -1), (1, 0), (1, 1)):
            other = by_cell.get((row + d_row, column + d_col))
            if other is not None:
                yield seat, other
