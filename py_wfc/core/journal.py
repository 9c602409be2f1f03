"""Undo journal for rolling back a failed collapse attempt."""

from typing import Dict, Iterator, Tuple

from .pixel import Location, Pixel


class UndoJournal:
    """
    Records the first pre-image of every location written since the
    checkpoint was taken.

    Restoring writes those pre-images back, which leaves the grid exactly
    as it was at the checkpoint without copying untouched cells. Stored
    pixels are never mutated in place, so keeping references is enough.
    """

    def __init__(self):
        self._saved: Dict[Location, Pixel] = {}

    def record(self, location: Location, previous: Pixel) -> None:
        if location not in self._saved:
            self._saved[location] = previous

    def __len__(self) -> int:
        return len(self._saved)

    def __contains__(self, location) -> bool:
        return location in self._saved

    def __iter__(self) -> Iterator[Tuple[Location, Pixel]]:
        return iter(self._saved.items())
