import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quicknotes.core.errors import DocumentDecodeError, NoteNotFoundError, NotePermissionError
from quicknotes.services.session import EditingSession


@pytest.fixture
def session(index, fs, timer, tmp_path):
    return EditingSession(index=index, fs=fs, timer=timer, recovery_dir=tmp_path / "recovery")


@pytest.fixture
def docs(tmp_path):
    path = tmp_path / "docs"
    path.mkdir()
    return path


def test_scratch_edits_are_never_autosaved(session, timer, fs):
    session.on_edit("scratch")

    assert not timer.is_active()
    assert fs.writes == []
    assert session.list_notes() == []


def test_save_as_registers_note(session, docs):
    session.on_edit("Groceries\nmilk")

    note = session.save_current_as("Groceries", docs)

    assert note.location == docs / "Groceries.txt"
    assert note.location.read_text(encoding="utf-8") == "Groceries\nmilk"
    assert note.title == "Groceries"
    assert session.current_note == note
    assert session.list_notes() == [note]


def test_save_as_resolves_collisions(session, docs):
    (docs / "Draft.txt").write_text("x", encoding="utf-8")
    (docs / "Draft (1).txt").write_text("y", encoding="utf-8")
    session.on_edit("Draft")

    note = session.save_current_as("Draft", docs)

    assert note.location == docs / "Draft (2).txt"
    assert (docs / "Draft.txt").read_text(encoding="utf-8") == "x"


def test_save_as_empty_title_uses_content(session, docs):
    session.on_edit("\nFrom the content\n")

    note = session.save_current_as("", docs)

    assert note.title == "From the content"
    assert note.location.name == "From the content.txt"


def test_save_as_keeps_id_on_resave(session, docs, tmp_path):
    session.on_edit("Essay")
    first = session.save_current_as("Essay", docs)
    other = tmp_path / "elsewhere"

    second = session.save_current_as("Essay", other)

    assert second.id == first.id
    assert second.location == other / "Essay.txt"
    assert session.list_notes() == [second]


def test_save_as_failure_leaves_index_untouched(session, fs, docs, permission_denied):
    session.on_edit("Locked")
    fs.write_error = permission_denied

    with pytest.raises(NotePermissionError):
        session.save_current_as("Locked", docs)

    assert session.list_notes() == []
    assert session.current_note is None


def test_explicit_save_cancels_pending_autosave(session, timer, fs, docs):
    session.on_edit("v1")
    note = session.save_current_as("Doc", docs)
    session.on_edit("v2")
    assert timer.is_active()

    session.on_edit("v3")
    saved = session.save_current()

    assert not timer.is_active()
    assert session.scheduler.pending_note_id is None
    assert note.location.read_text(encoding="utf-8") == "v3"
    assert saved.title == "v3"
    assert [w[1] for w in fs.writes] == [b"v1", b"v3"]


def test_save_current_without_note(session):
    session.on_edit("nothing to save to")
    assert session.save_current() is None


def test_edits_autosave_to_current_note(session, timer, docs):
    session.on_edit("First")
    note = session.save_current_as("First", docs)

    session.on_edit("First\nmore")
    timer.fire()

    assert note.location.read_text(encoding="utf-8") == "First\nmore"
    assert session.current_note.saved_at >= note.saved_at


def test_open_note_reads_file(session, index, make_note):
    note = make_note("Letter", content="Dear diary")
    index.upsert(note)

    assert session.open_note(note.id) == "Dear diary"
    assert session.current_note == note
    assert session.content == "Dear diary"


def test_open_unknown_or_missing(session, index, make_note):
    with pytest.raises(NoteNotFoundError):
        session.open_note("nope")

    gone = make_note("Gone", create=False)
    index.upsert(gone)
    with pytest.raises(NoteNotFoundError):
        session.open_note(gone.id)
    assert session.current_note is None


def test_open_non_text_file(session, index, make_note):
    note = make_note("Bin")
    note.location.write_bytes(b"\xff\xff")
    index.upsert(note)

    with pytest.raises(DocumentDecodeError):
        session.open_note(note.id)


def test_switching_flushes_pending_edit_to_old_note(session, index, timer, make_note):
    a = make_note("A", content="a")
    b = make_note("B", content="b")
    index.upsert(a)
    index.upsert(b)

    session.open_note(a.id)
    session.on_edit("a edited")
    session.open_note(b.id)

    assert not timer.is_active()
    assert a.location.read_text(encoding="utf-8") == "a edited"
    assert b.location.read_text(encoding="utf-8") == "b"
    assert session.content == "b"


def test_create_note_resets_to_scratch(session, index, timer, make_note):
    a = make_note("A", content="a")
    index.upsert(a)
    session.open_note(a.id)
    session.on_edit("a edited")

    session.create_note()

    assert session.current_note is None
    assert session.content == ""
    assert not timer.is_active()
    assert a.location.read_text(encoding="utf-8") == "a edited"


def test_delete_current_from_device_cancels_autosave(session, index, timer, make_note):
    a = make_note("A", content="a")
    index.upsert(a)
    session.open_note(a.id)
    session.on_edit("a edited")

    session.delete_from_device(a.id)

    assert not timer.is_active()
    assert not a.location.exists()
    assert a.id not in index
    assert session.current_note is None
    assert session.content == "a edited"


def test_delete_from_recent_and_clear_keep_files(session, index, make_note):
    a, b = make_note("A"), make_note("B")
    index.upsert(a)
    index.upsert(b)

    session.delete_from_recent(a.id)
    assert session.list_notes() == [b]

    session.clear_all()
    assert session.list_notes() == []
    assert a.location.exists() and b.location.exists()


def test_import_points_at_original_file(session, tmp_path, timer):
    original = tmp_path / "imported.md"
    original.write_text("Imported title\nbody", encoding="utf-8")

    note = session.import_document(original)

    assert note.location == original
    assert note.title == "Imported title"
    assert session.content == "Imported title\nbody"
    assert session.list_notes() == [note]

    session.on_edit("Imported title\nbody, edited")
    timer.fire()
    assert original.read_text(encoding="utf-8") == "Imported title\nbody, edited"
    assert list(tmp_path.glob("imported*")) == [original]


def test_import_same_file_twice_reuses_entry(session, tmp_path):
    original = tmp_path / "twice.txt"
    original.write_text("Twice", encoding="utf-8")

    first = session.import_document(original)
    second = session.import_document(original)

    assert second.id == first.id
    assert len(session.list_notes()) == 1


def test_import_failure_registers_nothing(session, tmp_path):
    bad = tmp_path / "bad.txt"
    bad.write_bytes(b"\xff\xfe\xfd")

    with pytest.raises(DocumentDecodeError):
        session.import_document(bad)

    assert session.list_notes() == []
    assert session.current_note is None


def test_close_flushes(session, index, make_note):
    a = make_note("A", content="a")
    index.upsert(a)
    session.open_note(a.id)
    session.on_edit("last words")

    session.close()

    assert a.location.read_text(encoding="utf-8") == "last words"


def test_autosave_failure_reported(index, fs, timer, make_note, tmp_path, permission_denied):
    failures = []
    session = EditingSession(
        index=index, fs=fs, timer=timer, recovery_dir=tmp_path / "recovery",
        on_autosave_failed=lambda n, e: failures.append(e),
    )
    a = make_note("A", content="a")
    index.upsert(a)
    session.open_note(a.id)
    fs.write_error = permission_denied

    session.on_edit("cannot land")
    timer.fire()

    assert failures == [permission_denied]
    assert a.location.read_text(encoding="utf-8") == "a"


def test_save_as_skips_directory_with_same_name(session, docs):
    (docs / "Draft.txt").mkdir()
    session.on_edit("Draft")

    note = session.save_current_as("Draft", docs)

    assert note.location == docs / "Draft (1).txt"
    assert note.location.read_text(encoding="utf-8") == "Draft"


def test_failed_save_as_keeps_edit_for_close(session, index, fs, timer, make_note, docs, permission_denied):
    a = make_note("A", content="v1")
    index.upsert(a)
    session.open_note(a.id)
    session.on_edit("v2 typed")
    fs.write_error = permission_denied

    with pytest.raises(NotePermissionError):
        session.save_current_as("Elsewhere", docs)

    assert session.scheduler.pending_note_id == a.id
    fs.write_error = None
    session.close()
    assert a.location.read_text(encoding="utf-8") == "v2 typed"


def test_failed_save_keeps_edit_for_close(session, index, fs, timer, make_note, permission_denied):
    a = make_note("A", content="v1")
    index.upsert(a)
    session.open_note(a.id)
    session.on_edit("v2 typed")
    fs.write_error = permission_denied

    with pytest.raises(NotePermissionError):
        session.save_current()

    assert timer.is_active()
    fs.write_error = None
    session.close()
    assert a.location.read_text(encoding="utf-8") == "v2 typed"


def test_reimport_open_document_keeps_pending_edit(session, index, make_note):
    a = make_note("A", content="old")
    index.upsert(a)
    session.open_note(a.id)
    session.on_edit("old plus new typing")

    note = session.import_document(a.location)

    assert note.id == a.id
    assert a.location.read_text(encoding="utf-8") == "old plus new typing"
    assert session.content == "old plus new typing"
