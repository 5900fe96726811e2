"""Tests for the collection command layer."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from music_bands.commands.manager import EMPTY_NOTICE, CollectionManager
from music_bands.commands.prompts import BufferPromptIO
from music_bands.domain.factory import BandDraft
from music_bands.domain.models import Album
from music_bands.io.bands_jsonl import BandRepository


@pytest.fixture
def manager(tmp_path: Path, clock: Callable[[], datetime]) -> CollectionManager:
    return CollectionManager(BandRepository(tmp_path / "bands.jsonl"), clock=clock)


def _fill(manager: CollectionManager, drafts: list[BandDraft]) -> None:
    for draft in drafts:
        assert manager.add_draft(draft).ok


def test_info_reports_type_and_size(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(manager, [make_draft(), make_draft()])
    result = manager.info()
    assert result.ok
    assert "BandStore" in result.text
    assert "Size: 2" in result.text
    assert manager.initialized_at.isoformat() in result.text


def test_show_lists_bands_in_id_order(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(manager, [make_draft(name=f"Band {i}") for i in range(3)])
    assert manager.remove_first().ok
    lines = manager.show().text.splitlines()
    assert [line.split(",")[0] for line in lines] == ["MusicBand{id=2", "MusicBand{id=3"]


def test_empty_collection_notices(manager: CollectionManager) -> None:
    for result in (
        manager.show(),
        manager.max_by_albums_count(),
        manager.remove_first(),
        manager.remove_head(),
        manager.print_field_ascending_number_of_participants(),
    ):
        assert result.ok
        assert result.text == EMPTY_NOTICE


def test_add_collects_fields_from_prompts(
    manager: CollectionManager,
    band_answers: list[str],
) -> None:
    io = BufferPromptIO(inputs=band_answers)
    result = manager.add(io)
    assert result.ok, result.text
    band = manager.store.get(1)
    assert band is not None
    assert band.name == "Pink Floyd"
    assert band.coordinates.x == 12.5
    assert band.best_album.tracks == 26


def test_add_reprompts_interactively_after_bad_value(
    manager: CollectionManager,
    band_answers: list[str],
) -> None:
    answers = list(band_answers)
    answers[1:2] = ["far", "407", "12.5"]
    io = BufferPromptIO(inputs=answers)
    assert manager.add(io).ok
    assert sum("Error" in line for line in io.outputs) == 2
    assert len(manager.store) == 1


def test_add_in_script_mode_fails_on_first_bad_value(
    manager: CollectionManager,
    band_answers: list[str],
) -> None:
    answers = list(band_answers)
    answers[3] = "four"
    io = BufferPromptIO(inputs=answers, interactive=False)
    result = manager.add(io)
    assert not result.ok
    assert "integer" in result.text
    assert len(manager.store) == 0
    assert manager.allocator.peek() == 1


def test_remove_by_id_reports_not_found_and_bad_input(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(manager, [make_draft(), make_draft()])
    assert manager.remove_by_id("1").ok
    second = manager.remove_by_id("1")
    assert not second.ok
    assert "No band with id 1" in second.text
    bad = manager.remove_by_id("abc")
    assert not bad.ok
    assert "integer" in bad.text
    assert manager.store.ids() == [2]


def test_remove_head_shows_removed_band(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(manager, [make_draft(name="First"), make_draft(name="Second")])
    result = manager.remove_head()
    assert result.ok
    assert "'First'" in result.text
    assert manager.store.ids() == [2]


def test_clear(manager: CollectionManager, make_draft: Callable[..., BandDraft]) -> None:
    _fill(manager, [make_draft()])
    assert manager.clear().ok
    assert len(manager.store) == 0


def test_add_if_min_only_succeeds_on_empty_store(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    assert manager.add_if_min_draft(make_draft()).ok
    rejected = manager.add_if_min_draft(make_draft(name="Later"))
    assert not rejected.ok
    assert manager.store.ids() == [1]

    # The rejection persists the unchanged collection.
    saved = manager.repository.path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["id"] for line in saved] == [1]

    manager.clear()
    assert manager.add_if_min_draft(make_draft(name="Fresh")).ok
    assert manager.store.ids() == [3]


def test_update_replaces_band_with_new_identity(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(manager, [make_draft(), make_draft()])
    old = manager.store.get(1)
    result = manager.update_draft(1, make_draft(name="Reborn"))
    assert result.ok
    assert manager.store.ids() == [2, 3]
    new = manager.store.get(3)
    assert new is not None and old is not None
    assert new.name == "Reborn"
    assert new.creation_date > old.creation_date


def test_rejected_drafts_are_reported_without_touching_the_store(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(manager, [make_draft()])
    for result in (
        manager.add_draft(make_draft(name="")),
        manager.update_draft(1, make_draft(albums_count=0)),
        manager.add_if_min_draft(make_draft(description=None)),
    ):
        assert not result.ok
        assert result.text.startswith("Error:")
    assert manager.store.ids() == [1]


def test_update_checks_id_before_prompting(manager: CollectionManager) -> None:
    io = BufferPromptIO()
    result = manager.update("42", io)
    assert not result.ok
    assert "No band with id 42" in result.text
    assert io.prompts == []


def test_max_by_albums_count(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(
        manager,
        [
            make_draft(name="None", albums_count=None),
            make_draft(name="Most", albums_count=9),
            make_draft(name="Tie", albums_count=9),
        ],
    )
    assert "name='Most'" in manager.max_by_albums_count().text


def test_count_less_than_best_album_by_tracks_and_sales(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(
        manager,
        [
            make_draft(best_album=Album(name="A", sales=5.0, tracks=8)),
            make_draft(best_album=Album(name="B", sales=50.0, tracks=12)),
        ],
    )
    by_tracks = manager.count_less_than_best_album("10", BufferPromptIO(inputs=["1"]))
    assert by_tracks.text.endswith(": 1")
    by_sales = manager.count_less_than_best_album("100", BufferPromptIO(inputs=["sales"]))
    assert by_sales.text.endswith(": 2")
    prompted = manager.count_less_than_best_album("", BufferPromptIO(inputs=["9", "2"]))
    assert prompted.text.endswith(": 1")


def test_count_less_than_best_album_rejects_bad_input(manager: CollectionManager) -> None:
    result = manager.count_less_than_best_album("ten", BufferPromptIO(inputs=["1"]))
    assert not result.ok
    script_io = BufferPromptIO(inputs=["3"], interactive=False)
    assert not manager.count_less_than_best_album("10", script_io).ok


def test_participants_ascending_with_absent_last(
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
) -> None:
    _fill(
        manager,
        [
            make_draft(number_of_participants=None),
            make_draft(number_of_participants=6),
            make_draft(number_of_participants=3),
        ],
    )
    text = manager.print_field_ascending_number_of_participants().text
    assert text.splitlines() == ["3", "6", "not specified"]


def test_save_and_load_round_trip_advances_allocator(
    tmp_path: Path,
    manager: CollectionManager,
    make_draft: Callable[..., BandDraft],
    clock: Callable[[], datetime],
) -> None:
    _fill(manager, [make_draft(), make_draft(number_of_participants=None)])
    assert manager.save().ok

    reloaded = CollectionManager(BandRepository(manager.repository.path), clock=clock)
    result = reloaded.load()
    assert result.ok
    assert list(reloaded.store) == list(manager.store)

    assert reloaded.add_draft(make_draft()).ok
    assert reloaded.store.ids() == [1, 2, 3]


def test_load_malformed_file_yields_empty_collection(tmp_path: Path) -> None:
    path = tmp_path / "bands.jsonl"
    path.write_text('{"id": 1}\n', encoding="utf-8")
    manager = CollectionManager(BandRepository(path))
    result = manager.load()
    assert not result.ok
    assert "empty collection" in result.text
    assert len(manager.store) == 0


def test_save_failure_is_reported(
    tmp_path: Path,
    make_draft: Callable[..., BandDraft],
) -> None:
    target = tmp_path / "dir"
    target.mkdir()
    manager = CollectionManager(BandRepository(target))
    manager.add_draft(make_draft())
    result = manager.save()
    assert not result.ok
    assert result.text.startswith("Error:")
    assert target.is_dir()
