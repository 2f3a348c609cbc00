from dataclasses import dataclass

from sqlalchemy import Column, Integer, String, Text

from notes_service.db import Base


class Note(Base):
    """SQLAlchemy model representing a note."""
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False, default="")
    date = Column(String(32), nullable=False)

    def to_record(self) -> "NoteRecord":
        return NoteRecord(id=self.id, title=self.title, content=self.content or "", date=self.date)


@dataclass(frozen=True)
class NoteRecord:
    """Detached, immutable snapshot of a stored note."""

    id: int
    title: str
    content: str
    date: str
