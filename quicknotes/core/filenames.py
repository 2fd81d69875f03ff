# quicknotes/core/filenames.py

from __future__ import annotations

import re
import unicodedata
from pathlib import Path
from typing import Callable

from quicknotes.core.models import UNTITLED


WINDOWS_RESERVED_NAMES = {
    "con", "prn", "aux", "nul",
    *(f"com{i}" for i in range(1, 10)),
    *(f"lpt{i}" for i in range(1, 10)),
}

INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*\u0000-\u001f]')
WHITESPACE_RE = re.compile(r"\s+")

MAX_FILENAME_LENGTH = 120
DOCUMENT_SUFFIX = ".txt"


def safe_filename(title: str) -> str:
    """Filename stem for a note title; same title, same stem."""
    if title is None:
        raise ValueError("safe_filename(): title is None")

    # NFKC so that composed and decomposed titles collide
    text = unicodedata.normalize("NFKC", str(title))
    text = "".join(ch for ch in text if not unicodedata.category(ch).startswith("C"))
    text = WHITESPACE_RE.sub(" ", text.strip())
    text = INVALID_CHARS_RE.sub("_", text.replace("/", "-").replace("\\", "-"))
    # Windows rejects a trailing dot or space
    stem = text[:MAX_FILENAME_LENGTH].rstrip(" .")
    if not stem:
        return UNTITLED

    if stem.split(".", 1)[0].strip().lower() in WINDOWS_RESERVED_NAMES:
        stem = "_" + stem
    return stem


def resolve_available_path(
    base_title: str,
    directory: Path,
    *,
    exists: Callable[[Path], bool] | None = None,
) -> Path:
    """
    First free path among:
      directory/<stem>.txt, directory/<stem> (1).txt, directory/<stem> (2).txt, ...

    `exists` defaults to Path.exists; pass FileSystem.exists to go through
    the same filesystem abstraction as the rest of the save path.
    """
    exists = exists or Path.exists
    directory = Path(directory).absolute()
    stem = safe_filename(base_title)

    candidate = directory / f"{stem}{DOCUMENT_SUFFIX}"
    counter = 1
    while exists(candidate):
        candidate = directory / f"{stem} ({counter}){DOCUMENT_SUFFIX}"
        counter += 1
    return candidate
