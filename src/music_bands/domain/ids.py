# music_bands/domain/ids.py

from __future__ import annotations


class IdAllocator:
    """Monotonic source of band IDs.

    One allocator is owned per collection session and handed to whatever
    builds new bands. IDs are never reused, even after the band is removed.
    """

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            msg = "start must be >= 1."
            raise ValueError(msg)
        self._next = start

    def next_id(self) -> int:
        """Consume and return the next ID."""
        value = self._next
        self._next += 1
        return value

    def peek(self) -> int:
        """Return the ID the next call to :meth:`next_id` would produce."""
        return self._next

    def advance_past(self, seen_id: int) -> None:
        """Make sure future IDs are strictly greater than ``seen_id``."""
        if seen_id >= self._next:
            self._next = seen_id + 1
