"""Shared fixtures for band collection tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from music_bands.domain.factory import BandDraft, BandFactory
from music_bands.domain.ids import IdAllocator
from music_bands.domain.models import Album, Coordinates, MusicGenre

BAND_ANSWERS = [
    "Pink Floyd",
    "12.5",
    "-3",
    "4",
    "15",
    "London psychedelia",
    "progressive_rock",
    "The Wall",
    "30000000",
    "26",
]


def build_draft(**overrides: Any) -> BandDraft:
    fields: dict[str, Any] = {
        "name": "Pink Floyd",
        "coordinates": Coordinates(x=12.5, y=-3.0),
        "number_of_participants": 4,
        "albums_count": 15,
        "description": "London psychedelia",
        "genre": MusicGenre.PROGRESSIVE_ROCK,
        "best_album": Album(name="The Wall", sales=30_000_000.0, tracks=26),
    }
    fields.update(overrides)
    return BandDraft(**fields)


@pytest.fixture
def make_draft() -> Callable[..., BandDraft]:
    return build_draft


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Deterministic clock ticking one second per call, with a +03:00 offset."""
    start = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=3)))
    calls = iter(range(10_000))
    return lambda: start + timedelta(seconds=next(calls))


@pytest.fixture
def factory(clock: Callable[[], datetime]) -> BandFactory:
    return BandFactory(IdAllocator(), clock=clock)


@pytest.fixture
def band_answers() -> list[str]:
    """Answers to the band prompts, in prompt order."""
    return list(BAND_ANSWERS)
