# music_bands/io/jsonl.py

"""Low-level JSONL read/write helpers."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from music_bands.domain.errors import PersistenceError

logger = logging.getLogger(__name__)


def iter_jsonl_objects(path: Path) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield ``(line_number, object)`` pairs, skipping blank lines.

    Unlike a best-effort reader, any line that is not a JSON object aborts
    the iteration with :class:`PersistenceError`.
    """
    with path.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                msg = f"Invalid JSON on line {line_number} of {path}: {exc}"
                raise PersistenceError(msg) from exc
            if not isinstance(obj, dict):
                msg = f"Line {line_number} of {path} is not a JSON object."
                raise PersistenceError(msg)
            yield line_number, obj


def write_jsonl_atomic(path: Path, objects: Iterable[dict[str, Any]]) -> None:
    """Write objects to a JSONL file, one per line, replacing it atomically.

    The data goes to a temporary file in the same directory first, so the
    previous content of ``path`` survives any failure during the write. The
    replacement keeps the permissions of the file it replaces.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=path.parent,
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            for obj in objects:
                f.write(json.dumps(obj, ensure_ascii=False, allow_nan=False) + "\n")
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, path)
    except BaseException:
        logger.debug("Discarding temporary file %s", tmp_path)
        tmp_path.unlink(missing_ok=True)
        raise


def _target_mode(path: Path) -> int:
    """Permission bits for ``path``: its current mode, or 0666 minus the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
