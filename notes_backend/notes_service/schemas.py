from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NoteFields(BaseModel):
    """Editor input. Validation happens in the editor after trimming, not here."""
    title: str = Field("", description="Note title; must be non-empty after trimming.")
    content: str = Field("", description="Note body; may be empty.")


class NoteOut(BaseModel):
    """Schema returned for a stored note."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Database ID of the note.")
    title: str = Field(..., description="Note title.")
    content: str = Field(..., description="Full note content.")
    date: str = Field(..., description="Timestamp of the last save (dd.MM.yyyy HH:mm).")


class NoteListItemOut(NoteOut):
    """A note as shown in the list, with a shortened content preview."""
    content_preview: str = Field(..., description="Content cut to 100 characters plus '...'.")


class EditorStateOut(BaseModel):
    """Fields loaded into the editor for an existing note."""
    note_id: int
    title: str
    content: str
    can_delete: bool


class EditorOutcomeOut(BaseModel):
    """Confirmation returned after a save or delete."""
    message: str = Field(..., description="User-facing confirmation.")
    note_id: int = Field(..., description="ID of the affected note.")
    finished: bool = Field(True, description="The editor is done; the client returns to the list.")
    note: Optional[NoteOut] = Field(None, description="The note as stored after a save.")
