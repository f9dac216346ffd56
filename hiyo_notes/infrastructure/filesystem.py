# hiyo_notes/infrastructure/filesystem.py

from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path

from hiyo_notes.core.filenames import safe_filename
from hiyo_notes.logging_setup import log
from hiyo_notes.settings import RECOVERY_DIR

PROBE_NAME = ".hiyo-notes-write-test"


def atomic_write_text(
    path: Path,
    text: str,
    *,
    encoding: str = "utf-8",
) -> None:
    """
    Atomic-ish file write:
    - write to temp file in same directory
    - fsync
    - replace()

    The parent directory must already exist; a missing one surfaces as
    FileNotFoundError so callers can decide whether to recreate it.
    """
    path = Path(path)
    tmp_path = path.parent / f".{path.name}.tmp-{uuid.uuid4().hex}"

    f = None
    try:
        f = open(tmp_path, "w", encoding=encoding, newline="")
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        f.close()
        f = None

        tmp_path.replace(path)

    finally:
        try:
            if f is not None:
                f.close()
        except OSError:
            pass

        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def ensure_directory(path: Path) -> bool:
    """mkdir -p; failures are logged and reported as False."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        log.exception("Failed to create directory: %s", path)
        return False
    return True


def probe_writable(directory: Path) -> bool:
    """
    Best-effort writability check: create and remove a throwaway file.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return False
    probe = directory / f"{PROBE_NAME}-{uuid.uuid4().hex[:6]}"
    try:
        probe.write_text("", encoding="utf-8")
        probe.unlink()
    except OSError as exc:
        log.warning("Directory is not writable: %s (%s)", directory, exc)
        return False
    return True


def write_recovery_copy(note_path: Path, text: str) -> Path:
    """
    Best-effort emergency save when normal save fails.

    Writes timestamped copy into:
      ~/.hiyo-notes/recovery/
    """
    note_path = Path(note_path)

    stem = safe_filename(note_path.stem) or "note"
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")

    RECOVERY_DIR.mkdir(parents=True, exist_ok=True)
    recovery_path = RECOVERY_DIR / f"{stem}.recovery.{ts}.md"
    atomic_write_text(recovery_path, text, encoding="utf-8")

    return recovery_path
