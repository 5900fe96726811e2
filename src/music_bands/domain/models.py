# music_bands/domain/models.py

"""Core domain models for music bands and their best albums.

Every model validates itself in ``__post_init__`` so an instance that
violates an invariant can never be observed. The field validators are
module-level so interactive prompts can check a single value before the
whole band is assembled.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from music_bands.domain.errors import ValidationError

MAX_COORDINATE_X = 406.0


class MusicGenre(str, Enum):
    PROGRESSIVE_ROCK = "PROGRESSIVE_ROCK"
    HIP_HOP = "HIP_HOP"
    BLUES = "BLUES"

    @classmethod
    def parse(cls, value: str) -> MusicGenre:
        """Look up a genre by name, ignoring case and surrounding whitespace."""
        key = value.strip().upper() if isinstance(value, str) else value
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(g.name for g in cls)
            msg = f"Unknown genre {value!r}; expected one of: {choices}."
            raise ValidationError(msg) from None


def _require_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"{field_name} must be a number, got {value!r}."
        raise ValidationError(msg)
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        msg = f"{field_name} must be a finite number, got {value!r}."
        raise ValidationError(msg)
    return number


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{field_name} must be an integer, got {value!r}."
        raise ValidationError(msg)
    return value


def validate_text(value: Any, field_name: str) -> str:
    """Return ``value`` if it is a non-empty string."""
    if not isinstance(value, str) or not value:
        msg = f"{field_name} must not be empty."
        raise ValidationError(msg)
    return value


def validate_coordinate_x(value: Any) -> float:
    x = _require_number(value, "Coordinate x")
    if x > MAX_COORDINATE_X:
        msg = f"Coordinate x must be <= {MAX_COORDINATE_X:g}, got {value!r}."
        raise ValidationError(msg)
    return x


def validate_coordinate_y(value: Any) -> float:
    return _require_number(value, "Coordinate y")


def validate_sales(value: Any) -> float:
    sales = _require_number(value, "Album sales")
    if not sales > 0:
        msg = f"Album sales must be > 0, got {value!r}."
        raise ValidationError(msg)
    return sales


def validate_positive_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number <= 0:
        msg = f"{field_name} must be > 0, got {value!r}."
        raise ValidationError(msg)
    return number


def validate_optional_positive_int(value: Any, field_name: str) -> int | None:
    if value is None:
        return None
    return validate_positive_int(value, field_name)


@dataclass(frozen=True, slots=True)
class Coordinates:
    """Position of a band on the map."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", validate_coordinate_x(self.x))
        object.__setattr__(self, "y", validate_coordinate_y(self.y))

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


@dataclass(frozen=True, slots=True)
class Album:
    """The best album of a band."""

    name: str
    sales: float
    tracks: int

    def __post_init__(self) -> None:
        validate_text(self.name, "Album name")
        object.__setattr__(self, "sales", validate_sales(self.sales))
        validate_positive_int(self.tracks, "Album tracks")

    def __str__(self) -> str:
        return f"{{name={self.name!r}, sales={self.sales:.2f}, tracks={self.tracks}}}"


def validate_band_fields(
    *,
    name: Any,
    coordinates: Any,
    number_of_participants: Any,
    albums_count: Any,
    description: Any,
    genre: Any,
    best_album: Any,
) -> None:
    """Check every user-supplied band field, raising on the first violation."""
    validate_text(name, "Band name")
    if not isinstance(coordinates, Coordinates):
        msg = "Coordinates are required."
        raise ValidationError(msg)
    validate_optional_positive_int(number_of_participants, "Number of participants")
    validate_optional_positive_int(albums_count, "Albums count")
    if not isinstance(description, str):
        msg = "Description must be a string."
        raise ValidationError(msg)
    if not isinstance(genre, MusicGenre):
        msg = "Genre is required."
        raise ValidationError(msg)
    if not isinstance(best_album, Album):
        msg = "Best album is required."
        raise ValidationError(msg)


@dataclass(frozen=True, slots=True)
class MusicBand:
    """A band stored in the collection, ordered by ``id``.

    New bands are built through :class:`music_bands.domain.factory.BandFactory`,
    which assigns the ID and creation date. Calling the constructor directly
    is reserved for restoring bands that already have an identity.
    """

    id: int
    name: str
    coordinates: Coordinates
    creation_date: datetime
    number_of_participants: int | None
    albums_count: int | None
    description: str
    genre: MusicGenre
    best_album: Album

    def __post_init__(self) -> None:
        validate_positive_int(self.id, "Band id")
        if not isinstance(self.creation_date, datetime) or (
            self.creation_date.utcoffset() is None
        ):
            msg = "Creation date must be a timezone-aware datetime."
            raise ValidationError(msg)
        validate_band_fields(
            name=self.name,
            coordinates=self.coordinates,
            number_of_participants=self.number_of_participants,
            albums_count=self.albums_count,
            description=self.description,
            genre=self.genre,
            best_album=self.best_album,
        )

    def __str__(self) -> str:
        return (
            f"MusicBand{{id={self.id}, name={self.name!r}, genre={self.genre.name}, "
            f"albums={_or_dash(self.albums_count)}, "
            f"participants={_or_dash(self.number_of_participants)}, "
            f"coordinates={self.coordinates}, "
            f"creationDate={self.creation_date.isoformat()}, "
            f"description={self.description!r}, bestAlbum={self.best_album}}}"
        )


def _or_dash(value: int | None) -> str:
    return "-" if value is None else str(value)
