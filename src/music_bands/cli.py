# music_bands/cli.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from music_bands import config
from music_bands.commands.manager import CollectionManager
from music_bands.commands.prompts import ConsolePromptIO, PromptIO
from music_bands.commands.shell import CommandShell
from music_bands.io.bands_jsonl import BandRepository

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None, *, io: PromptIO | None = None) -> None:
    """Entry point for the music-bands collection shell."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    _configure_logging(verbose=args.verbose)

    collection_file = args.file or config.get_default_collection_path()
    if collection_file is None:
        parser.error("the collection file is required (argument FILE or MUSIC_BANDS_FILE).")

    path = Path(collection_file)
    problem = _check_readable(path)
    if problem is not None:
        print(f"Error: {problem}", file=sys.stderr)
        sys.exit(1)

    io = io or ConsolePromptIO()
    manager = CollectionManager(BandRepository(path))
    io.print(manager.load().text)

    shell = CommandShell(manager, io)
    try:
        shell.run()
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Exiting.")
        sys.exit(1)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-bands",
        description="Manage a collection of music bands stored in a JSONL file.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="Path to the collection file (default: $MUSIC_BANDS_FILE).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )
    return parser


def _configure_logging(*, verbose: bool) -> None:
    level = logging.DEBUG if verbose else config.get_log_level()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _check_readable(path: Path) -> str | None:
    if not path.exists():
        return f"file does not exist: {path}"
    try:
        with path.open("rb"):
            pass
    except OSError as exc:
        return f"cannot read {path}: {exc.strerror or exc}"
    return None


if __name__ == "__main__":
    # python -m music_bands.cli data/bands.jsonl
    main()
