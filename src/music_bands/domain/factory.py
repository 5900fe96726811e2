# music_bands/domain/factory.py

"""Creation path for new bands: validate first, then allocate an identity."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from music_bands.domain.errors import ValidationError
from music_bands.domain.ids import IdAllocator
from music_bands.domain.models import (
    Album,
    Coordinates,
    MusicBand,
    MusicGenre,
    validate_band_fields,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class BandDraft:
    """User-supplied band fields, before an ID and creation date exist."""

    name: str
    coordinates: Coordinates
    number_of_participants: int | None
    albums_count: int | None
    description: str
    genre: MusicGenre
    best_album: Album


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of :meth:`BandFactory.create`: exactly one of band/error is set."""

    band: MusicBand | None = None
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.band is not None

    def unwrap(self) -> MusicBand:
        """Return the built band, or raise the validation error that prevented it."""
        if self.band is not None:
            return self.band
        if self.error is not None:
            raise self.error
        msg = "BuildResult holds neither a band nor an error."
        raise ValueError(msg)


class BandFactory:
    def __init__(
        self,
        allocator: IdAllocator,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._allocator = allocator
        self._clock = clock or _utc_now

    @property
    def allocator(self) -> IdAllocator:
        return self._allocator

    def create(self, draft: BandDraft) -> BuildResult:
        """Build a new band from ``draft``.

        The ID is only allocated once every field has passed validation, so a
        rejected draft never consumes an ID.
        """
        try:
            validate_band_fields(
                name=draft.name,
                coordinates=draft.coordinates,
                number_of_participants=draft.number_of_participants,
                albums_count=draft.albums_count,
                description=draft.description,
                genre=draft.genre,
                best_album=draft.best_album,
            )
        except ValidationError as exc:
            return BuildResult(error=exc)

        band = MusicBand(
            id=self._allocator.next_id(),
            name=draft.name,
            coordinates=draft.coordinates,
            creation_date=self._clock(),
            number_of_participants=draft.number_of_participants,
            albums_count=draft.albums_count,
            description=draft.description,
            genre=draft.genre,
            best_album=draft.best_album,
        )
        return BuildResult(band=band)
