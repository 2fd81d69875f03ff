from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from striprtf.striprtf import rtf_to_text

from quicknotes.core.errors import DocumentDecodeError, UnsupportedDocumentError
from quicknotes.core.models import extract_title
from quicknotes.infrastructure.filesystem import FileSystem
from quicknotes.settings import APP_NAME, DEFAULT_ENCODING


log = logging.getLogger(APP_NAME)

PLAIN_TEXT_SUFFIXES = (".txt", ".md")
RICH_TEXT_SUFFIXES = (".rtf",)
SUPPORTED_SUFFIXES = PLAIN_TEXT_SUFFIXES + RICH_TEXT_SUFFIXES


@dataclass(frozen=True)
class ImportedDocument:
    path: Path
    content: str
    title: str


def read_document(path: Path, fs: FileSystem, *, encoding: str = DEFAULT_ENCODING) -> ImportedDocument:
    """
    Read an existing document as plain text.

    .txt/.md are decoded with `encoding`; .rtf is converted with striprtf.
    Raises NoteNotFoundError, DocumentDecodeError or UnsupportedDocumentError.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedDocumentError(
            f"Unsupported document type {suffix or '(none)'}: {path.name}"
        )

    raw = fs.read_bytes(path)

    if suffix in RICH_TEXT_SUFFIXES:
        content = _rtf_bytes_to_text(raw, path)
    else:
        try:
            content = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            raise DocumentDecodeError(f"{path.name} is not valid {encoding} text") from exc

    log.info("Document read for import: path=%s type=%s chars=%d", path, suffix, len(content))
    return ImportedDocument(path=path, content=content, title=extract_title(content))


def _rtf_bytes_to_text(raw: bytes, path: Path) -> str:
    # RTF is 7-bit; non-ASCII characters arrive as \'xx or \uN escapes
    try:
        return rtf_to_text(raw.decode("latin-1"))
    except Exception as exc:
        raise DocumentDecodeError(f"{path.name} is not a readable RTF document") from exc
