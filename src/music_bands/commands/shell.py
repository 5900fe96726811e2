# music_bands/commands/shell.py

"""Line-oriented front end: parse a line, dispatch it, run scripts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import assert_never

from music_bands.commands.manager import CollectionManager, CommandResult
from music_bands.commands.prompts import PromptIO, ScriptPromptIO
from music_bands.domain.errors import InputFormatError, ScriptError

logger = logging.getLogger(__name__)


class CommandName(str, Enum):
    HELP = "help"
    INFO = "info"
    SHOW = "show"
    ADD = "add"
    UPDATE = "update"
    REMOVE_BY_ID = "remove_by_id"
    CLEAR = "clear"
    SAVE = "save"
    EXECUTE_SCRIPT = "execute_script"
    EXIT = "exit"
    REMOVE_FIRST = "remove_first"
    REMOVE_HEAD = "remove_head"
    ADD_IF_MIN = "add_if_min"
    MAX_BY_ALBUMS_COUNT = "max_by_albums_count"
    COUNT_LESS_THAN_BEST_ALBUM = "count_less_than_best_album"
    PRINT_FIELD_ASCENDING_NUMBER_OF_PARTICIPANTS = (
        "print_field_ascending_number_of_participants"
    )


HELP_TEXT: dict[CommandName, tuple[str, str]] = {
    CommandName.HELP: ("", "show this help"),
    CommandName.INFO: ("", "show collection type, initialization date and size"),
    CommandName.SHOW: ("", "list all bands"),
    CommandName.ADD: ("", "add a new band"),
    CommandName.UPDATE: ("{id}", "replace a band with a newly entered one"),
    CommandName.REMOVE_BY_ID: ("{id}", "remove a band by id"),
    CommandName.CLEAR: ("", "remove all bands"),
    CommandName.SAVE: ("", "save the collection to its file"),
    CommandName.EXECUTE_SCRIPT: ("{file}", "run commands from a file"),
    CommandName.EXIT: ("", "leave without saving"),
    CommandName.REMOVE_FIRST: ("", "remove the band with the smallest id"),
    CommandName.REMOVE_HEAD: ("", "show and remove the band with the smallest id"),
    CommandName.ADD_IF_MIN: ("", "add a band if its id would be the new minimum"),
    CommandName.MAX_BY_ALBUMS_COUNT: ("", "show the band with the most albums"),
    CommandName.COUNT_LESS_THAN_BEST_ALBUM: (
        "{value}",
        "count bands whose best album tracks or sales are below value",
    ),
    CommandName.PRINT_FIELD_ASCENDING_NUMBER_OF_PARTICIPANTS: (
        "",
        "print participant counts in ascending order",
    ),
}


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    name: CommandName
    argument: str = ""


def parse_command(line: str) -> ParsedCommand | None:
    """Split ``line`` into keyword and argument; ``None`` for a blank line."""
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return None
    keyword = parts[0].lower()
    argument = parts[1] if len(parts) > 1 else ""
    try:
        name = CommandName(keyword)
    except ValueError:
        msg = f"Unknown command {parts[0]!r}. Type 'help' for the list of commands."
        raise InputFormatError(msg) from None
    return ParsedCommand(name=name, argument=argument)


class CommandShell:
    """Runs commands against one :class:`CollectionManager`."""

    def __init__(self, manager: CollectionManager, io: PromptIO) -> None:
        self.manager = manager
        self.io = io
        self.running = True
        self._active_scripts: list[Path] = []

    def run(self) -> None:
        """Read and execute commands until ``exit`` or end of input."""
        while self.running:
            try:
                line = self.io.input("> ")
                result = self.execute(line, self.io)
            except EOFError:
                self.io.print("")
                break
            except KeyboardInterrupt:
                logger.warning("Interrupted by user. Exiting.")
                break
            if result.text:
                self.io.print(result.text)
        self.io.print("Bye.")

    def execute(self, line: str, io: PromptIO | None = None) -> CommandResult:
        """Execute one command line; prompts go to ``io`` (default: the shell's)."""
        if io is None:
            io = self.io
        try:
            parsed = parse_command(line)
        except InputFormatError as exc:
            logger.info("Rejected line %r: %s", line, exc)
            return CommandResult.failure(f"Error: {exc}")
        if parsed is None:
            return CommandResult.success("")
        logger.debug("Executing %s %r", parsed.name.value, parsed.argument)
        return self._dispatch(parsed, io)

    def _dispatch(self, command: ParsedCommand, io: PromptIO) -> CommandResult:
        manager = self.manager
        arg = command.argument
        match command.name:
            case CommandName.HELP:
                return CommandResult.success(self.help_text())
            case CommandName.INFO:
                return manager.info()
            case CommandName.SHOW:
                return manager.show()
            case CommandName.ADD:
                return manager.add(io)
            case CommandName.UPDATE:
                return manager.update(arg, io)
            case CommandName.REMOVE_BY_ID:
                return manager.remove_by_id(arg)
            case CommandName.CLEAR:
                return manager.clear()
            case CommandName.SAVE:
                return manager.save()
            case CommandName.EXECUTE_SCRIPT:
                return self.execute_script(arg)
            case CommandName.EXIT:
                self.running = False
                return CommandResult.success("Exiting.")
            case CommandName.REMOVE_FIRST:
                return manager.remove_first()
            case CommandName.REMOVE_HEAD:
                return manager.remove_head()
            case CommandName.ADD_IF_MIN:
                return manager.add_if_min(io)
            case CommandName.MAX_BY_ALBUMS_COUNT:
                return manager.max_by_albums_count()
            case CommandName.COUNT_LESS_THAN_BEST_ALBUM:
                return manager.count_less_than_best_album(arg, io)
            case CommandName.PRINT_FIELD_ASCENDING_NUMBER_OF_PARTICIPANTS:
                return manager.print_field_ascending_number_of_participants()
            case _:
                assert_never(command.name)

    @staticmethod
    def help_text() -> str:
        lines = ["Available commands:"]
        for name, (args, text) in HELP_TEXT.items():
            usage = f"{name.value} {args}" if args else name.value
            lines.append(f"  {usage} : {text}")
        return "\n".join(lines)

    def execute_script(self, raw_path: str) -> CommandResult:
        """Run every line of a script file against the same collection.

        Each line's result is printed as it completes. A failing line is
        reported and execution moves on to the next one. Commands that ask
        for input read their answers from the following lines.
        """
        if not raw_path.strip():
            return CommandResult.failure("Error: execute_script needs a file name.")
        path = Path(raw_path.strip()).expanduser()
        try:
            resolved = path.resolve()
            if resolved in self._active_scripts:
                msg = f"Script {path} is already running; recursive call skipped."
                raise ScriptError(msg)
            handle = path.open("r", encoding="utf-8")
        except ScriptError as exc:
            logger.warning("%s", exc)
            return CommandResult.failure(f"Error: {exc}")
        except OSError as exc:
            logger.warning("Cannot open script %s: %s", path, exc)
            return CommandResult.failure(f"Error: cannot open script {path}: {exc.strerror or exc}")

        executed = failed = 0
        self._active_scripts.append(resolved)
        try:
            with handle:
                script_io = ScriptPromptIO(iter(handle), self.io)
                while self.running:
                    try:
                        line = script_io.next_line()
                    except ScriptError as exc:
                        logger.warning("%s: %s", path, exc)
                        return CommandResult.failure(f"Error: {exc}")
                    if line is None:
                        break
                    if not line.strip():
                        continue
                    start = script_io.line_number
                    result = self.execute(line, script_io)
                    executed += 1
                    if not result.ok:
                        failed += 1
                        self.io.print(f"[{path.name}:{start}] {result.text}")
                    elif result.text:
                        self.io.print(result.text)
        finally:
            self._active_scripts.pop()

        summary = f"Script {path} finished: {executed} commands, {failed} failed."
        logger.info(summary)
        return CommandResult(ok=failed == 0, text=summary)
