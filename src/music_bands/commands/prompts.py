# music_bands/commands/prompts.py

"""Prompt IO and collection of band fields from a user or a script."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, TypeVar

from music_bands.domain.errors import InputFormatError, ScriptError, ValidationError
from music_bands.domain.factory import BandDraft
from music_bands.domain.models import (
    Album,
    Coordinates,
    MusicGenre,
    validate_coordinate_x,
    validate_coordinate_y,
    validate_optional_positive_int,
    validate_positive_int,
    validate_sales,
    validate_text,
)

T = TypeVar("T")


class PromptIO(Protocol):
    interactive: bool

    def print(self, text: str = "") -> None: ...

    def input(self, prompt: str = "") -> str: ...


class ConsolePromptIO:
    interactive = True

    def print(self, text: str = "") -> None:
        print(text)

    def input(self, prompt: str = "") -> str:
        return input(prompt)


@dataclass(slots=True)
class BufferPromptIO:
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    interactive: bool = True

    def print(self, text: str = "") -> None:
        self.outputs.append(text)

    def input(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.inputs:
            raise EOFError("BufferPromptIO has no more inputs")
        return self.inputs.pop(0)


class ScriptPromptIO:
    """Answers prompts with the following lines of a script file.

    Output is forwarded to ``out``. Running out of lines while a command is
    still asking for input is an input error for that command only.
    """

    interactive = False

    def __init__(self, lines: Iterator[str], out: PromptIO) -> None:
        self._lines = lines
        self._out = out
        self.line_number = 0

    def next_line(self) -> str | None:
        try:
            line = next(self._lines, None)
        except UnicodeDecodeError as exc:
            msg = f"Script line {self.line_number + 1} is not valid UTF-8: {exc}"
            raise ScriptError(msg) from exc
        if line is None:
            return None
        self.line_number += 1
        return line.rstrip("\r\n")

    def print(self, text: str = "") -> None:
        self._out.print(text)

    def input(self, prompt: str = "") -> str:
        line = self.next_line()
        if line is None:
            msg = f"Script ended while waiting for: {prompt.strip()}"
            raise InputFormatError(msg)
        return line


class AlbumField(str, Enum):
    TRACKS = "tracks"
    SALES = "sales"

    @classmethod
    def parse(cls, value: str) -> AlbumField:
        key = value.strip().lower()
        aliases = {"1": cls.TRACKS, "2": cls.SALES}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            msg = f"Choose 1 (tracks) or 2 (sales), got {value!r}."
            raise InputFormatError(msg) from None


def parse_int(text: str, field_name: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        msg = f"{field_name} must be an integer, got {text.strip()!r}."
        raise InputFormatError(msg) from None


def parse_float(text: str, field_name: str) -> float:
    try:
        value = float(text.strip())
    except ValueError:
        msg = f"{field_name} must be a number, got {text.strip()!r}."
        raise InputFormatError(msg) from None
    if not math.isfinite(value):
        msg = f"{field_name} must be a finite number, got {text.strip()!r}."
        raise InputFormatError(msg)
    return value


def parse_optional_int(text: str, field_name: str) -> int | None:
    if not text.strip():
        return None
    return parse_int(text, field_name)


def ask(io: PromptIO, prompt: str, parse: Callable[[str], T]) -> T:
    """Prompt until ``parse`` accepts the answer.

    Only interactive IO is asked again; for scripts the first bad answer
    propagates and aborts the current command.
    """
    while True:
        raw = io.input(prompt).strip()
        try:
            return parse(raw)
        except (InputFormatError, ValidationError) as exc:
            if not io.interactive:
                raise
            io.print(f"Error: {exc}")


def read_band_draft(io: PromptIO) -> BandDraft:
    """Collect every user-supplied band field from ``io``."""
    if io.interactive:
        io.print("=== New music band ===")
    name = ask(io, "Band name: ", lambda s: validate_text(s, "Band name"))
    x = ask(
        io,
        "Coordinate x (<= 406): ",
        lambda s: validate_coordinate_x(parse_float(s, "Coordinate x")),
    )
    y = ask(
        io,
        "Coordinate y: ",
        lambda s: validate_coordinate_y(parse_float(s, "Coordinate y")),
    )
    participants = ask(
        io,
        "Number of participants (blank if unknown): ",
        lambda s: validate_optional_positive_int(
            parse_optional_int(s, "Number of participants"),
            "Number of participants",
        ),
    )
    albums_count = ask(
        io,
        "Albums count (blank if unknown): ",
        lambda s: validate_optional_positive_int(
            parse_optional_int(s, "Albums count"),
            "Albums count",
        ),
    )
    description = ask(io, "Description: ", str)
    genre = ask(
        io,
        f"Genre ({', '.join(g.name for g in MusicGenre)}): ",
        MusicGenre.parse,
    )
    album_name = ask(io, "Best album name: ", lambda s: validate_text(s, "Album name"))
    sales = ask(
        io,
        "Best album sales (> 0): ",
        lambda s: validate_sales(parse_float(s, "Album sales")),
    )
    tracks = ask(
        io,
        "Best album tracks (> 0): ",
        lambda s: validate_positive_int(parse_int(s, "Album tracks"), "Album tracks"),
    )
    return BandDraft(
        name=name,
        coordinates=Coordinates(x=x, y=y),
        number_of_participants=participants,
        albums_count=albums_count,
        description=description,
        genre=genre,
        best_album=Album(name=album_name, sales=sales, tracks=tracks),
    )
