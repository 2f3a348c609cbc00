import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from notes_service.db import Base
from notes_service.errors import StoreFailure
from notes_service.models import Note, NoteRecord

logger = logging.getLogger(__name__)


class NoteStore:
    """
    CRUD access to persisted notes.

    Each call runs in its own short-lived session and hands back detached
    NoteRecord snapshots. Database errors are rolled back and re-raised as
    StoreFailure so callers never mistake a failed write for a success.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Note store %s failed", operation)
            raise StoreFailure(operation, exc) from exc
        finally:
            db.close()

    # PUBLIC_INTERFACE
    def create_schema(self) -> None:
        """Create the notes table if it does not exist."""
        bind = self._session_factory.kw["bind"]
        try:
            Base.metadata.create_all(bind=bind)
        except SQLAlchemyError as exc:
            logger.exception("Creating the notes schema failed")
            raise StoreFailure("create_schema", exc) from exc

    # PUBLIC_INTERFACE
    def create_note(self, title: str, content: str, date: str) -> int:
        """Insert a note and return its generated id."""
        with self._session("create_note") as db:
            note = Note(title=title, content=content, date=date)
            db.add(note)
            db.flush()
            note_id = note.id
        logger.info("Created note id=%s title_len=%s content_len=%s", note_id, len(title), len(content))
        return note_id

    # PUBLIC_INTERFACE
    def get_note(self, note_id: int) -> Optional[NoteRecord]:
        """Return the note with this id, or None."""
        with self._session("get_note") as db:
            note = db.get(Note, note_id)
            return note.to_record() if note else None

    # PUBLIC_INTERFACE
    def get_all_notes(self) -> List[NoteRecord]:
        """Return every note in insertion order."""
        with self._session("get_all_notes") as db:
            return [note.to_record() for note in db.query(Note).order_by(Note.id.asc()).all()]

    # PUBLIC_INTERFACE
    def update_note(self, note_id: int, title: str, content: str, date: str) -> bool:
        """Overwrite title, content and date. Returns False if the note does not exist."""
        with self._session("update_note") as db:
            note = db.get(Note, note_id)
            if not note:
                return False
            note.title = title
            note.content = content
            note.date = date
        logger.info("Updated note id=%s title_len=%s content_len=%s", note_id, len(title), len(content))
        return True

    # PUBLIC_INTERFACE
    def delete_note(self, note_id: int) -> bool:
        """Delete a note. Returns False if the note does not exist."""
        with self._session("delete_note") as db:
            note = db.get(Note, note_id)
            if not note:
                return False
            db.delete(note)
        logger.info("Deleted note id=%s", note_id)
        return True
