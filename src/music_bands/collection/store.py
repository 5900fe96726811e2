# music_bands/collection/store.py

"""ID-ordered band container with an ID index."""

from __future__ import annotations

import heapq
from collections.abc import Callable, Iterable, Iterator

from music_bands.domain.errors import DuplicateIdError
from music_bands.domain.models import MusicBand


class BandStore:
    """Priority queue of bands keyed by ascending ``id``.

    ``_index`` maps ID to band and decides membership. ``_heap`` holds IDs in
    heap order; removals by ID leave a stale entry behind that is dropped the
    next time it reaches the top. An entry counts as live exactly when its ID
    is in the index, so a leftover entry for a re-added ID just stands in for
    the live one.
    """

    def __init__(self, bands: Iterable[MusicBand] = ()) -> None:
        self._heap: list[int] = []
        self._index: dict[int, MusicBand] = {}
        self.replace_all(bands)

    def __len__(self) -> int:
        return len(self._index)

    def __bool__(self) -> bool:
        return bool(self._index)

    def __contains__(self, band_id: object) -> bool:
        return band_id in self._index

    def __iter__(self) -> Iterator[MusicBand]:
        """Iterate over bands in ascending ID order."""
        for band_id in sorted(self._index):
            yield self._index[band_id]

    def get(self, band_id: int) -> MusicBand | None:
        return self._index.get(band_id)

    def ids(self) -> list[int]:
        return sorted(self._index)

    # -- mutation ---------------------------------------------------------

    def add(self, band: MusicBand) -> None:
        if band.id in self._index:
            msg = f"A band with id {band.id} is already stored."
            raise DuplicateIdError(msg)
        self._index[band.id] = band
        heapq.heappush(self._heap, band.id)

    def remove_by_id(self, band_id: int) -> bool:
        """Remove the band with ``band_id``; return whether it existed."""
        if self._index.pop(band_id, None) is None:
            return False
        self._prune()
        return True

    def remove_head(self) -> MusicBand | None:
        """Remove and return the band with the smallest ID."""
        self._prune()
        if not self._heap:
            return None
        band_id = heapq.heappop(self._heap)
        return self._index.pop(band_id)

    def remove_first(self) -> bool:
        return self.remove_head() is not None

    def clear(self) -> None:
        self._heap.clear()
        self._index.clear()

    def add_if_min(self, band: MusicBand) -> bool:
        """Insert ``band`` only if its ID is lower than the current minimum."""
        head = self.peek_min()
        if head is not None and band.id >= head.id:
            return False
        self.add(band)
        return True

    def update(self, band_id: int, band: MusicBand) -> bool:
        """Replace the band stored under ``band_id`` with ``band``.

        ``band`` carries its own (new) identity. Returns False without changes
        when ``band_id`` is absent; raises if ``band.id`` belongs to another band.
        """
        if band_id not in self._index:
            return False
        if band.id != band_id and band.id in self._index:
            msg = f"A band with id {band.id} is already stored."
            raise DuplicateIdError(msg)
        self.remove_by_id(band_id)
        self.add(band)
        return True

    def replace_all(self, bands: Iterable[MusicBand]) -> None:
        """Swap the whole content for ``bands``, or leave it untouched on error."""
        index: dict[int, MusicBand] = {}
        for band in bands:
            if band.id in index:
                msg = f"Duplicate band id {band.id}."
                raise DuplicateIdError(msg)
            index[band.id] = band
        heap = list(index)
        heapq.heapify(heap)
        self._index = index
        self._heap = heap

    # -- queries ----------------------------------------------------------

    def peek_min(self) -> MusicBand | None:
        self._prune()
        if not self._heap:
            return None
        return self._index[self._heap[0]]

    def max_by_albums_count(self) -> MusicBand | None:
        """Band with the most albums; absent counts as 0, lowest ID wins ties."""
        best: MusicBand | None = None
        for band in self:
            if best is None or (band.albums_count or 0) > (best.albums_count or 0):
                best = band
        return best

    def count_where(self, predicate: Callable[[MusicBand], bool]) -> int:
        return sum(1 for band in self._index.values() if predicate(band))

    def ascending_participants(self) -> list[int | None]:
        """Participant counts in ascending order, absent values last."""
        return sorted(
            (band.number_of_participants for band in self),
            key=lambda n: (n is None, n or 0),
        )

    def _prune(self) -> None:
        heap = self._heap
        while heap and heap[0] not in self._index:
            heapq.heappop(heap)
        # Keep the heap from growing without bound under many removals.
        if len(heap) > 2 * len(self._index) + 16:
            self._heap = [i for i in heap if i in self._index]
            heapq.heapify(self._heap)
