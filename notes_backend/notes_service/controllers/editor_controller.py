import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from notes_service.errors import EditorModeError, NotFoundError, ValidationError
from notes_service.store import NoteStore

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d.%m.%Y %H:%M"


@dataclass(frozen=True)
class EditorOutcome:
    """Result of a completed editor action."""

    message: str
    note_id: int
    finished: bool = True


class NoteEditorController:
    """
    Create or edit a single note.

    The mode is chosen once: without `note_id` the editor creates a new note
    and delete is unavailable; with `note_id` the fields are loaded from the
    store and a missing note raises NotFoundError.
    """

    def __init__(
        self,
        store: NoteStore,
        note_id: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._note_id = note_id
        self._editing = note_id is not None
        self._clock = clock
        self.title = ""
        self.content = ""
        if self._editing:
            note = store.get_note(note_id)
            if note is None:
                raise NotFoundError(note_id)
            self.title = note.title
            self.content = note.content

    @property
    def note_id(self) -> Optional[int]:
        return self._note_id

    @property
    def is_editing(self) -> bool:
        return self._editing

    @property
    def can_delete(self) -> bool:
        return self._editing

    def _timestamp(self) -> str:
        return self._clock().strftime(DATE_FORMAT)

    # PUBLIC_INTERFACE
    def save(self, title: str, content: str) -> EditorOutcome:
        """Validate and persist the fields; raises ValidationError on an empty title."""
        title = (title or "").strip()
        content = (content or "").strip()
        if not title:
            logger.info("Rejected note save: empty title (note_id=%s)", self._note_id)
            raise ValidationError("title", "Title is required")

        date = self._timestamp()
        if self._editing:
            if not self._store.update_note(self._note_id, title, content, date):
                raise NotFoundError(self._note_id)
            message = "Note updated"
        else:
            self._note_id = self._store.create_note(title, content, date)
            message = "Note saved"

        self.title = title
        self.content = content
        return EditorOutcome(message=message, note_id=self._note_id)

    # PUBLIC_INTERFACE
    def delete(self) -> EditorOutcome:
        """Delete the note being edited."""
        if not self._editing:
            raise EditorModeError("A new note cannot be deleted")
        if not self._store.delete_note(self._note_id):
            raise NotFoundError(self._note_id)
        return EditorOutcome(message="Note deleted", note_id=self._note_id)
