from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Iterable

from quicknotes.core.models import Note


class MalformedIndexError(ValueError):
    """Persisted index bytes cannot be decoded into notes."""


def encode_notes(notes: Iterable[Note]) -> bytes:
    payload = [
        {
            "id": n.id,
            "title": n.title,
            "location": str(n.location),
            "saved_at": n.saved_at.isoformat(),
        }
        for n in notes
    ]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_notes(raw: bytes | str) -> list[Note]:
    """
    Inverse of encode_notes. Any deviation from the expected shape
    raises MalformedIndexError: the whole payload is rejected, not
    individual records.
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        items = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedIndexError(str(exc)) from exc

    if not isinstance(items, list):
        raise MalformedIndexError(f"expected a list, got {type(items).__name__}")

    notes: list[Note] = []
    for item in items:
        try:
            note_id = item["id"]
            title = item["title"]
            location = item["location"]
            if not all(isinstance(v, str) for v in (note_id, title, location)) or not note_id:
                raise TypeError("id/title/location must be strings")
            notes.append(Note(
                id=note_id,
                title=title,
                location=Path(location),
                saved_at=datetime.fromisoformat(item["saved_at"]),
            ))
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedIndexError(f"bad note record {item!r}: {exc}") from exc
    return notes
