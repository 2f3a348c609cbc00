from __future__ import annotations

import pytest

from notes_service.controllers.editor_controller import NoteEditorController
from notes_service.errors import EditorModeError, NotFoundError, StoreFailure, ValidationError
from notes_service.store import NoteStore


def test_create_mode_starts_blank_without_delete(store, clock) -> None:
    editor = NoteEditorController(store, clock=clock)
    assert (editor.title, editor.content) == ("", "")
    assert editor.is_editing is False
    assert editor.can_delete is False
    with pytest.raises(EditorModeError):
        editor.delete()


def test_save_in_create_mode_trims_and_stamps(store, clock) -> None:
    outcome = NoteEditorController(store, clock=clock).save("  Groceries ", " buy eggs\n")

    assert outcome.message == "Note saved"
    assert outcome.finished is True
    note = store.get_note(outcome.note_id)
    assert (note.title, note.content, note.date) == ("Groceries", "buy eggs", "05.03.2024 14:07")


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_blank_title_is_rejected(store, clock, title) -> None:
    editor = NoteEditorController(store, clock=clock)

    with pytest.raises(ValidationError) as excinfo:
        editor.save(title, "content")

    assert excinfo.value.field == "title"
    assert store.get_all_notes() == []


def test_editor_stays_usable_after_validation_error(store, clock) -> None:
    editor = NoteEditorController(store, clock=clock)
    with pytest.raises(ValidationError):
        editor.save("", "x")
    assert editor.save("Title", "x").message == "Note saved"


def test_edit_mode_prepopulates_fields(store, clock) -> None:
    note_id = store.create_note("Groceries", "buy eggs", "d")

    editor = NoteEditorController(store, note_id, clock=clock)

    assert (editor.title, editor.content) == ("Groceries", "buy eggs")
    assert editor.can_delete is True


def test_edit_mode_missing_note_raises_not_found(store, clock) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        NoteEditorController(store, 42, clock=clock)
    assert excinfo.value.note_id == 42


def test_groceries_scenario(store, clock) -> None:
    created = NoteEditorController(store, clock=clock).save("Groceries", "buy eggs")
    assert created.note_id == 1

    updated = NoteEditorController(store, 1, clock=clock).save("Groceries", "buy eggs and milk")
    assert updated.message == "Note updated"
    assert updated.note_id == 1
    assert store.get_note(1).content == "buy eggs and milk"

    deleted = NoteEditorController(store, 1, clock=clock).delete()
    assert deleted.message == "Note deleted"
    assert 1 not in [n.id for n in store.get_all_notes()]


def test_save_after_note_was_deleted_raises_not_found(store, clock) -> None:
    note_id = store.create_note("t", "c", "d")
    editor = NoteEditorController(store, note_id, clock=clock)
    store.delete_note(note_id)

    with pytest.raises(NotFoundError):
        editor.save("t", "c")
    with pytest.raises(NotFoundError):
        editor.delete()


def test_store_failure_is_not_reported_as_success(session_factory, clock) -> None:
    editor = NoteEditorController(NoteStore(session_factory), clock=clock)
    with pytest.raises(StoreFailure):
        editor.save("Title", "content")
