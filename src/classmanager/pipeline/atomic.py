"""All-or-nothing writes of a group of files."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from classmanager.errors import StylesheetWriteError

logger = logging.getLogger(__name__)


def _discard(paths: list[Path]) -> None:
    for path in paths:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


def _sibling(target: Path, suffix: str) -> tuple[int, Path]:
    fd, name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=suffix)
    return fd, Path(name)


def _stage(files: dict[Path, str]) -> list[tuple[Path, Path]]:
    """Write each content to a temp file beside its target."""
    staged: list[tuple[Path, Path]] = []
    for target, content in files.items():
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = _sibling(target, ".tmp")
            staged.append((tmp, target))
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
                fh.write(content)
        except (OSError, UnicodeError) as exc:
            _discard([tmp for tmp, _ in staged])
            raise StylesheetWriteError(
                f"Failed to write {target}", path=str(target), cause=exc
            ) from exc
    return staged


def _restore(backups: list[tuple[Path, Path]]) -> None:
    for backup, target in reversed(backups):
        try:
            os.replace(backup, target)
        except OSError:
            logger.exception("Could not restore %s from %s", target, backup)


def write_atomically(files: dict[Path, str]) -> None:
    """Write every ``path -> content`` pair or none of them.

    Each file is first written to a temporary file beside its target. Existing
    targets are then moved aside and the temporary files renamed into place.
    If any rename fails, the new files are removed and the moved-aside ones
    put back, so a failed write leaves the previous files untouched.

    Raises:
        StylesheetWriteError: if any file could not be written.
    """
    staged = _stage(files)

    backups: list[tuple[Path, Path]] = []
    replaced: list[Path] = []
    reserved: Path | None = None
    current: Path | None = None
    try:
        for tmp, target in staged:
            current = target
            if target.exists():
                fd, reserved = _sibling(target, ".bak")
                os.close(fd)
                os.replace(target, reserved)
                backups.append((reserved, target))
                reserved = None
            os.replace(tmp, target)
            replaced.append(target)
    except OSError as exc:
        if reserved is not None:
            _discard([reserved])
        _discard(replaced)
        _restore(backups)
        _discard([tmp for tmp, _ in staged])
        raise StylesheetWriteError(
            f"Failed to replace {current}", path=str(current), cause=exc
        ) from exc

    _discard([backup for backup, _ in backups])
