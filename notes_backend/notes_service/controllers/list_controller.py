import logging
from typing import Optional, Tuple

from notes_service.errors import PositionOutOfRange
from notes_service.models import NoteRecord
from notes_service.store import NoteStore

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def content_preview(content: str, limit: int = PREVIEW_LENGTH) -> str:
    """Shorten content for list display: the first `limit` chars plus '...' when cut."""
    if len(content) > limit:
        return content[:limit] + "..."
    return content


def matches(note: NoteRecord, query_text: str) -> bool:
    """Case-insensitive substring match on title or content."""
    needle = query_text.lower()
    return needle in note.title.lower() or needle in note.content.lower()


class NoteListController:
    """Holds the displayed notes and the active filter text."""

    def __init__(self, store: NoteStore) -> None:
        self._store = store
        self._notes: Tuple[NoteRecord, ...] = ()
        self._query: Optional[str] = None

    @property
    def notes(self) -> Tuple[NoteRecord, ...]:
        return self._notes

    @property
    def query(self) -> Optional[str]:
        return self._query

    # PUBLIC_INTERFACE
    def refresh(self) -> Tuple[NoteRecord, ...]:
        """Reload every note and drop the active filter."""
        self._notes = tuple(self._store.get_all_notes())
        self._query = None
        return self._notes

    # PUBLIC_INTERFACE
    def filter(self, query_text: str) -> Tuple[NoteRecord, ...]:
        """Reload every note and keep those matching `query_text`; order is preserved."""
        notes = self._store.get_all_notes()
        self._notes = tuple(note for note in notes if matches(note, query_text))
        self._query = query_text
        logger.debug("Filter matched %s of %s notes", len(self._notes), len(notes))
        return self._notes

    # PUBLIC_INTERFACE
    def select_note(self, index: int) -> NoteRecord:
        """Return the displayed note at `index`."""
        if index < 0 or index >= len(self._notes):
            raise PositionOutOfRange(index, len(self._notes))
        return self._notes[index]
