from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from quicknotes.settings import TITLE_MAX_LENGTH

UNTITLED = "Untitled"


@dataclass(frozen=True)
class Note:
    """
    Metadata of one document known to the index.
    The content itself lives only in the file at `location`.
    """
    id: str
    title: str
    location: Path
    saved_at: datetime

    def touched(self, content: str, *, saved_at: datetime | None = None) -> "Note":
        """Copy with title re-derived from `content` and a fresh save timestamp."""
        return replace(
            self,
            title=extract_title(content),
            saved_at=saved_at or datetime.now(),
        )


def new_note_id() -> str:
    return uuid.uuid4().hex


def extract_title(content: str, *, max_len: int = TITLE_MAX_LENGTH) -> str:
    for line in (content or "").splitlines():
        line = line.strip()
        if line:
            return line[:max_len]
    return UNTITLED
