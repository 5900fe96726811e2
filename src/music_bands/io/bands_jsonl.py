# music_bands/io/bands_jsonl.py

"""Persist the band collection as JSON Lines, one band per line.

Optional fields are always written; an absent value is stored as ``null``
so it stays distinguishable from a present value on reload. Timestamps are
ISO 8601 strings with a UTC offset.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from music_bands.domain.errors import PersistenceError, ValidationError
from music_bands.domain.models import Album, Coordinates, MusicBand, MusicGenre
from music_bands.io.jsonl import iter_jsonl_objects, write_jsonl_atomic

logger = logging.getLogger(__name__)


def _require(raw: dict[str, Any], key: str) -> Any:
    if key not in raw:
        msg = f"Missing field {key!r}."
        raise ValidationError(msg)
    return raw[key]


def _require_object(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = _require(raw, key)
    if not isinstance(value, dict):
        msg = f"Field {key!r} must be an object."
        raise ValidationError(msg)
    return value


def _parse_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        msg = f"creation_date must be a string, got {value!r}."
        raise ValidationError(msg)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid creation_date {value!r}."
        raise ValidationError(msg) from exc
    if parsed.utcoffset() is None:
        msg = f"creation_date {value!r} has no UTC offset."
        raise ValidationError(msg)
    return parsed


def _parse_genre(value: Any) -> MusicGenre:
    # Stored names must match exactly; case folding is for interactive input.
    if not isinstance(value, str) or value not in MusicGenre.__members__:
        msg = f"Unknown genre {value!r}."
        raise ValidationError(msg)
    return MusicGenre[value]


def _coordinates_from_raw(raw: dict[str, Any]) -> Coordinates:
    return Coordinates(x=_require(raw, "x"), y=_require(raw, "y"))


def _album_from_raw(raw: dict[str, Any]) -> Album:
    return Album(
        name=_require(raw, "name"),
        sales=_require(raw, "sales"),
        tracks=_require(raw, "tracks"),
    )


def band_from_raw(raw: dict[str, Any]) -> MusicBand:
    """Convert a raw JSON dict into a MusicBand, keeping its stored ID."""
    return MusicBand(
        id=_require(raw, "id"),
        name=_require(raw, "name"),
        coordinates=_coordinates_from_raw(_require_object(raw, "coordinates")),
        creation_date=_parse_datetime(_require(raw, "creation_date")),
        number_of_participants=_require(raw, "number_of_participants"),
        albums_count=_require(raw, "albums_count"),
        description=_require(raw, "description"),
        genre=_parse_genre(_require(raw, "genre")),
        best_album=_album_from_raw(_require_object(raw, "best_album")),
    )


def band_to_raw(band: MusicBand) -> dict[str, Any]:
    """Convert a MusicBand into a JSON-serialisable dict."""
    return {
        "id": band.id,
        "name": band.name,
        "coordinates": {
            "x": band.coordinates.x,
            "y": band.coordinates.y,
        },
        "creation_date": band.creation_date.isoformat(),
        "number_of_participants": band.number_of_participants,
        "albums_count": band.albums_count,
        "description": band.description,
        "genre": band.genre.name,
        "best_album": {
            "name": band.best_album.name,
            "sales": band.best_album.sales,
            "tracks": band.best_album.tracks,
        },
    }


def load_bands_from_jsonl(path: str | Path) -> list[MusicBand]:
    """Load every band from ``path``.

    A missing or blank file yields an empty list. Anything malformed raises
    :class:`PersistenceError`; no partial result is ever returned.
    """
    file_path = Path(path)
    if not file_path.exists():
        logger.info("Collection file %s not found; starting empty.", file_path)
        return []

    bands: list[MusicBand] = []
    seen: set[int] = set()
    try:
        for line_number, raw in iter_jsonl_objects(file_path):
            try:
                band = band_from_raw(raw)
            except ValidationError as exc:
                msg = f"Invalid band on line {line_number} of {file_path}: {exc}"
                raise PersistenceError(msg) from exc
            if band.id in seen:
                msg = f"Duplicate band id {band.id} on line {line_number} of {file_path}."
                raise PersistenceError(msg)
            seen.add(band.id)
            bands.append(band)
    except OSError as exc:
        msg = f"Cannot read {file_path}: {exc}"
        raise PersistenceError(msg) from exc
    except UnicodeDecodeError as exc:
        msg = f"{file_path} is not valid UTF-8: {exc}"
        raise PersistenceError(msg) from exc

    logger.info("Loaded %d bands from %s.", len(bands), file_path)
    return bands


def save_bands_to_jsonl(bands: Iterable[MusicBand], path: str | Path) -> int:
    """Write bands to ``path`` in ascending ID order; return how many."""
    file_path = Path(path)
    ordered = sorted(bands, key=lambda b: b.id)
    try:
        write_jsonl_atomic(file_path, (band_to_raw(b) for b in ordered))
    except (OSError, ValueError) as exc:
        msg = f"Cannot write {file_path}: {exc}"
        raise PersistenceError(msg) from exc

    logger.info("Saved %d bands to %s.", len(ordered), file_path)
    return len(ordered)


class BandRepository:
    """Load/save the collection at a fixed location."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[MusicBand]:
        return load_bands_from_jsonl(self.path)

    def save(self, bands: Iterable[MusicBand]) -> int:
        return save_bands_to_jsonl(bands, self.path)
