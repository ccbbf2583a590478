"""Seat layout generation.

Seats are arranged as tables of four chairs labelled by cardinal position
(``T1-N``, ``T1-S``, ``T1-E``, ``T1-W``, ``T2-N`` ...). Availability is
derived from the event's seat counter only: the seat with 1-based ordinal
``n`` is available iff ``n <= available_seats``. Which labels were actually
sold is not tracked.
"""

from dataclasses import dataclass

POSITIONS = ("N", "S", "E", "W")


@dataclass(frozen=True)
class Seat:
    """A seat in the generated layout."""

    seat_id: str
    ordinal: int
    table: int
    position: str
    is_available: bool


def seat_label(table: int, position: str) -> str:
    """Return the identifier of the chair at ``position`` of ``table``."""
    return f"T{table}-{position}"


def generate_seat_layout(
    total_seats: int,
    available_seats: int,
    seats_per_table: int = len(POSITIONS),
) -> list[Seat]:
    """
    Generate the ordered seat layout for an event.

    Args:
        total_seats: Number of seats in the venue
        available_seats: Current value of the event's seat counter
        seats_per_table: Chairs per table, at most four

    Returns:
        Seats ordered by ordinal. The same inputs always give the same layout.
    """
    if total_seats < 0:
        raise ValueError("total_seats must not be negative")
    if not 1 <= seats_per_table <= len(POSITIONS):
        raise ValueError(f"seats_per_table must be between 1 and {len(POSITIONS)}")

    seats = []
    for index in range(total_seats):
        table_index, chair = divmod(index, seats_per_table)
        ordinal = index + 1
        position = POSITIONS[chair]
        seats.append(
            Seat(
                seat_id=seat_label(table_index + 1, position),
                ordinal=ordinal,
                table=table_index + 1,
                position=position,
                is_available=ordinal <= available_seats,
            )
        )
    return seats


def group_by_table(seats: list[Seat]) -> dict[int, list[Seat]]:
    """Group a layout into tables, preserving order."""
    tables: dict[int, list[Seat]] = {}
    for seat in seats:
        tables.setdefault(seat.table, []).append(seat)
    return tables


def availability_map(seats: list[Seat]) -> dict[str, bool]:
    """Map seat identifiers to their availability flag."""
    return {seat.seat_id: seat.is_available for seat in seats}
