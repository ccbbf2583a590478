"""In-memory seat selection for one checkout."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

SelectionListener = Callable[[list[str]], None]


class SeatSelection:
    """
    Ordered set of chosen seat identifiers with a selection cap.

    Every mutation emits the current selection to the registered listener.
    Toggling past the cap, or toggling an unavailable seat, is silently
    ignored.
    """

    def __init__(
        self,
        max_selection: int = 4,
        on_change: SelectionListener | None = None,
    ):
        if max_selection < 1:
            raise ValueError("max_selection must be at least 1")
        self.max_selection = max_selection
        self._seats: list[str] = []
        self._listener = on_change

    @property
    def seats(self) -> list[str]:
        """Current selection, in the order seats were picked."""
        return list(self._seats)

    @property
    def is_full(self) -> bool:
        return len(self._seats) >= self.max_selection

    def __len__(self) -> int:
        return len(self._seats)

    def __contains__(self, seat_id: object) -> bool:
        return seat_id in self._seats

    def on_change(self, listener: SelectionListener | None) -> None:
        """Register the observer, replacing any previous one."""
        self._listener = listener

    def toggle(self, seat_id: str, is_available: bool) -> None:
        """
        Add or remove a seat.

        Args:
            seat_id: Seat identifier from the layout
            is_available: Availability flag of the seat at render time
        """
        if not is_available:
            return

        if seat_id in self._seats:
            self._seats.remove(seat_id)
        elif not self.is_full:
            self._seats.append(seat_id)
        else:
            logger.debug(f"Selection full ({self.max_selection}), ignoring {seat_id}")
            return

        self._emit()

    def clear(self) -> None:
        """Empty the selection."""
        self._seats.clear()
        self._emit()

    def _emit(self) -> None:
        if self._listener is not None:
            self._listener(self.seats)
