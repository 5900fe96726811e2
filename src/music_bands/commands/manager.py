# music_bands/commands/manager.py

"""Command layer: one method per collection command.

Every method returns a :class:`CommandResult`. Expected failures
(validation, missing IDs, bad arguments, I/O problems) are turned into a
failed result with a readable message instead of being raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from music_bands.collection.store import BandStore
from music_bands.domain.errors import (
    BandCollectionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from music_bands.domain.factory import BandDraft, BandFactory
from music_bands.domain.ids import IdAllocator
from music_bands.io.bands_jsonl import BandRepository
from music_bands.commands.prompts import (
    AlbumField,
    PromptIO,
    ask,
    parse_float,
    parse_int,
    read_band_draft,
)

logger = logging.getLogger(__name__)

EMPTY_NOTICE = "Collection is empty."


@dataclass(frozen=True, slots=True)
class CommandResult:
    ok: bool
    text: str

    @classmethod
    def success(cls, text: str) -> CommandResult:
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, text: str) -> CommandResult:
        return cls(ok=False, text=text)


def _failure(exc: BandCollectionError) -> CommandResult:
    logger.warning("%s: %s", type(exc).__name__, exc)
    return CommandResult.failure(f"Error: {exc}")


class CollectionManager:
    """Owns the band store, its ID allocator and the collection file."""

    def __init__(
        self,
        repository: BandRepository,
        *,
        allocator: IdAllocator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.repository = repository
        self.store = BandStore()
        self.allocator = allocator or IdAllocator()
        self.factory = BandFactory(self.allocator, clock=clock)
        self.initialized_at = datetime.now(timezone.utc)

    # -- persistence ------------------------------------------------------

    def load(self) -> CommandResult:
        """Replace the store with the file content, or empty it on error."""
        try:
            bands = self.repository.load()
            self.store.replace_all(bands)
        except BandCollectionError as exc:
            self.store.clear()
            logger.error("Discarding collection from %s: %s", self.repository.path, exc)
            return CommandResult.failure(
                f"Error: could not load collection: {exc}. Starting with an empty collection."
            )

        if bands:
            self.allocator.advance_past(max(band.id for band in bands))
            return CommandResult.success(f"Loaded {len(bands)} bands from {self.repository.path}.")
        return CommandResult.success("No saved bands found. Starting with an empty collection.")

    def save(self) -> CommandResult:
        try:
            count = self.repository.save(self.store)
        except PersistenceError as exc:
            return _failure(exc)
        return CommandResult.success(f"Saved {count} bands to {self.repository.path}.")

    # -- read-only commands ----------------------------------------------

    def info(self) -> CommandResult:
        lines = [
            f"Type: {type(self.store).__name__} (priority queue ordered by id)",
            f"Initialized: {self.initialized_at.isoformat()}",
            f"Size: {len(self.store)}",
        ]
        return CommandResult.success("\n".join(lines))

    def show(self) -> CommandResult:
        if not self.store:
            return CommandResult.success(EMPTY_NOTICE)
        return CommandResult.success("\n".join(str(band) for band in self.store))

    def max_by_albums_count(self) -> CommandResult:
        band = self.store.max_by_albums_count()
        if band is None:
            return CommandResult.success(EMPTY_NOTICE)
        return CommandResult.success(str(band))

    def count_less_than_best_album(self, raw_value: str, io: PromptIO) -> CommandResult:
        try:
            if raw_value.strip():
                threshold = parse_float(raw_value, "Comparison value")
            else:
                threshold = ask(
                    io,
                    "Value to compare with: ",
                    lambda s: parse_float(s, "Comparison value"),
                )
            album_field = ask(
                io,
                "Compare by (1 - tracks, 2 - sales): ",
                AlbumField.parse,
            )
        except BandCollectionError as exc:
            return _failure(exc)

        if album_field is AlbumField.TRACKS:
            count = self.store.count_where(lambda b: b.best_album.tracks < threshold)
        else:
            count = self.store.count_where(lambda b: b.best_album.sales < threshold)
        return CommandResult.success(
            f"Bands with best album {album_field.value} < {threshold:g}: {count}"
        )

    def print_field_ascending_number_of_participants(self) -> CommandResult:
        if not self.store:
            return CommandResult.success(EMPTY_NOTICE)
        values = self.store.ascending_participants()
        return CommandResult.success(
            "\n".join("not specified" if v is None else str(v) for v in values)
        )

    # -- mutating commands -----------------------------------------------

    def add(self, io: PromptIO) -> CommandResult:
        try:
            draft = read_band_draft(io)
        except BandCollectionError as exc:
            return _failure(exc)
        return self.add_draft(draft)

    def add_draft(self, draft: BandDraft) -> CommandResult:
        try:
            band = self.factory.create(draft).unwrap()
        except ValidationError as exc:
            return _failure(exc)
        self.store.add(band)
        logger.debug("Added band id=%s", band.id)
        return CommandResult.success(f"Band added with id {band.id}.")

    def update(self, raw_id: str, io: PromptIO) -> CommandResult:
        try:
            band_id = parse_int(raw_id, "ID")
            if band_id not in self.store:
                msg = f"No band with id {band_id}."
                raise NotFoundError(msg)
            draft = read_band_draft(io)
        except BandCollectionError as exc:
            return _failure(exc)
        return self.update_draft(band_id, draft)

    def update_draft(self, band_id: int, draft: BandDraft) -> CommandResult:
        """Replace band ``band_id`` with a new band built from ``draft``.

        The replacement gets a fresh ID and creation date.
        """
        if band_id not in self.store:
            return _failure(NotFoundError(f"No band with id {band_id}."))
        try:
            band = self.factory.create(draft).unwrap()
        except ValidationError as exc:
            return _failure(exc)
        self.store.update(band_id, band)
        return CommandResult.success(f"Band {band_id} replaced by band with id {band.id}.")

    def remove_by_id(self, raw_id: str) -> CommandResult:
        try:
            band_id = parse_int(raw_id, "ID")
            if not self.store.remove_by_id(band_id):
                msg = f"No band with id {band_id}."
                raise NotFoundError(msg)
        except BandCollectionError as exc:
            return _failure(exc)
        return CommandResult.success(f"Band {band_id} removed.")

    def clear(self) -> CommandResult:
        self.store.clear()
        return CommandResult.success("Collection cleared.")

    def remove_first(self) -> CommandResult:
        if not self.store.remove_first():
            return CommandResult.success(EMPTY_NOTICE)
        return CommandResult.success("First band removed.")

    def remove_head(self) -> CommandResult:
        band = self.store.remove_head()
        if band is None:
            return CommandResult.success(EMPTY_NOTICE)
        return CommandResult.success(f"Removed: {band}")

    def add_if_min(self, io: PromptIO) -> CommandResult:
        try:
            draft = read_band_draft(io)
        except BandCollectionError as exc:
            return _failure(exc)
        return self.add_if_min_draft(draft)

    def add_if_min_draft(self, draft: BandDraft) -> CommandResult:
        """Build a band and keep it only if its ID is below the current minimum.

        A rejected band is discarded and the unchanged collection is saved.
        """
        try:
            band = self.factory.create(draft).unwrap()
        except ValidationError as exc:
            return _failure(exc)
        if self.store.add_if_min(band):
            return CommandResult.success(f"Band added with id {band.id}.")

        saved = self.save()
        text = f"Band not added: id {band.id} is not below the current minimum."
        if not saved.ok:
            return CommandResult.failure(f"{text}\n{saved.text}")
        return CommandResult.failure(text)
