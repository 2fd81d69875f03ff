# quicknotes/infrastructure/filesystem.py

from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Protocol

from quicknotes.core.errors import translate_os_error
from quicknotes.core.filenames import safe_filename
from quicknotes.settings import RECOVERY_DIR


class FileSystem(Protocol):
    """Operations the note core needs from the disk."""

    def exists(self, path: Path) -> bool:
        ...

    def is_taken(self, path: Path) -> bool:
        ...

    def read_bytes(self, path: Path) -> bytes:
        ...

    def write_bytes(self, path: Path, data: bytes) -> None:
        ...

    def delete(self, path: Path) -> None:
        ...


# ───────────────────────── atomic writes ─────────────────────────

def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Atomic-ish file write:
    - write to temp file in same directory
    - fsync
    - replace()

    Prevents partial writes on crash/power loss.
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"

    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    finally:
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def atomic_write_text(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    atomic_write_bytes(path, text.encode(encoding))


def write_recovery_copy(
    note_path: Path,
    text: str,
    *,
    recovery_dir: Path = RECOVERY_DIR,
) -> Path:
    """
    Best-effort emergency save when normal save fails.

    Writes timestamped copy into:
      ~/.quicknotes/recovery/
    """
    note_path = Path(note_path)

    stem = safe_filename(note_path.stem)
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")

    recovery_path = Path(recovery_dir) / f"{stem}.recovery.{ts}.txt"
    atomic_write_text(recovery_path, text, encoding="utf-8")

    return recovery_path


# ───────────────────────── local disk ─────────────────────────

class LocalFileSystem:
    """FileSystem over the local disk; OSErrors become note errors."""

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def is_taken(self, path: Path) -> bool:
        # any entry, directories included, blocks a new file of that name
        return Path(path).exists()

    def read_bytes(self, path: Path) -> bytes:
        path = Path(path)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise translate_os_error(exc, path, writing=False) from exc

    def write_bytes(self, path: Path, data: bytes) -> None:
        path = Path(path)
        try:
            atomic_write_bytes(path, data)
        except OSError as exc:
            raise translate_os_error(exc, path, writing=True) from exc

    def delete(self, path: Path) -> None:
        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            # already gone
            return
        except OSError as exc:
            raise translate_os_error(exc, path, writing=True) from exc
