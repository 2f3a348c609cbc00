import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from notes_service.controllers.editor_controller import EditorOutcome, NoteEditorController
from notes_service.controllers.list_controller import NoteListController, content_preview
from notes_service.db import SessionLocal, get_db
from notes_service.errors import (
    EditorModeError,
    NotFoundError,
    PositionOutOfRange,
    StoreFailure,
    ValidationError,
)
from notes_service.models import NoteRecord
from notes_service.schemas import (
    EditorOutcomeOut,
    EditorStateOut,
    NoteFields,
    NoteListItemOut,
    NoteOut,
)
from notes_service.store import NoteStore

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health and readiness endpoints."},
    {"name": "Notes", "description": "Note list, search and editor operations."},
]

app = FastAPI(
    title="Notes API",
    description="Minimal notes service: list and filter notes, create, edit and delete a single note.",
    version="1.0.0",
    openapi_tags=openapi_tags,
)

_store = NoteStore(SessionLocal)


# PUBLIC_INTERFACE
def get_store() -> NoteStore:
    """FastAPI dependency returning the process-wide note store."""
    return _store


def _parse_allowed_origins() -> List[str]:
    """
    Parse comma-separated ALLOWED_ORIGINS from env.

    Falls back to localhost dev origins when not set.
    """
    raw = (os.getenv("ALLOWED_ORIGINS") or "").strip()
    if not raw:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]

    origins = [o.strip() for o in raw.split(",")]
    return [o for o in origins if o]


def _parse_allowed_origin_regex() -> Optional[str]:
    """Return the ALLOWED_ORIGIN_REGEX override, or None to rely on the explicit origin list."""
    raw = (os.getenv("ALLOWED_ORIGIN_REGEX") or "").strip()
    return raw or None


app.add_middleware(
    CORSMiddleware,
    allow_origins=_parse_allowed_origins(),
    allow_origin_regex=_parse_allowed_origin_regex(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Field-level validation failure: the note was not saved."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.message, "field": exc.field},
    )


@app.exception_handler(NotFoundError)
async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """The requested note does not exist (or was deleted meanwhile)."""
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Note not found"})


@app.exception_handler(PositionOutOfRange)
async def _position_handler(request: Request, exc: PositionOutOfRange) -> JSONResponse:
    """The requested list position is outside the displayed notes."""
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(EditorModeError)
async def _editor_mode_handler(request: Request, exc: EditorModeError) -> JSONResponse:
    """The editor action is not available for a new note."""
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(StoreFailure)
async def _store_failure_handler(request: Request, exc: StoreFailure) -> JSONResponse:
    """The store already logged the cause; report the failure without internals."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Note storage unavailable", "operation": exc.operation},
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return JSON for unexpected errors."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.on_event("startup")
def _startup_create_tables() -> None:
    """
    Create database tables if they do not exist.

    Do not fail application startup if the DB is unavailable; /health/db reports it.
    """
    try:
        get_store().create_schema()
    except StoreFailure:
        logger.exception("Database initialization failed during startup (tables not created).")


def _list_view(controller: NoteListController, q: Optional[str]) -> Tuple[NoteRecord, ...]:
    if q:
        return controller.filter(q)
    return controller.refresh()


def _list_item(note: NoteRecord) -> NoteListItemOut:
    return NoteListItemOut(
        id=note.id,
        title=note.title,
        content=note.content,
        date=note.date,
        content_preview=content_preview(note.content),
    )


def _outcome(outcome: EditorOutcome, note: Optional[NoteRecord] = None) -> EditorOutcomeOut:
    return EditorOutcomeOut(
        message=outcome.message,
        note_id=outcome.note_id,
        finished=outcome.finished,
        note=NoteOut.model_validate(note) if note else None,
    )


# PUBLIC_INTERFACE
@app.get("/", tags=["Health"], summary="Health check", description="Returns a simple health payload.")
def health_check() -> Dict[str, str]:
    """Health check endpoint used by monitoring."""
    return {"message": "Healthy"}


# PUBLIC_INTERFACE
@app.get(
    "/health/db",
    tags=["Health"],
    summary="Database health check",
    description="Runs SELECT 1; returns status=up on success, otherwise status=down with error details.",
)
def health_check_db(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Database readiness endpoint used to verify DB connectivity."""
    try:
        value = db.execute(text("SELECT 1")).scalar_one()
        return {"status": "up", "query": "SELECT 1", "result": int(value)}
    except Exception as exc:
        return {"status": "down", "error": str(exc)}


# PUBLIC_INTERFACE
@app.get(
    "/notes",
    response_model=List[NoteListItemOut],
    tags=["Notes"],
    summary="List notes",
    description="Return all notes in insertion order; with q, only notes whose title or content contains q (case-insensitive).",
)
def list_notes(q: Optional[str] = Query(None), store: NoteStore = Depends(get_store)) -> List[NoteListItemOut]:
    """List or filter notes."""
    notes = _list_view(NoteListController(store), q)
    return [_list_item(note) for note in notes]


# PUBLIC_INTERFACE
@app.get(
    "/notes/at/{index}",
    response_model=NoteOut,
    tags=["Notes"],
    summary="Select note by position",
    description="Return the note at a position of the list view (optionally filtered by q).",
)
def select_note(index: int, q: Optional[str] = Query(None), store: NoteStore = Depends(get_store)) -> NoteOut:
    """Pick a note from the displayed list."""
    controller = NoteListController(store)
    _list_view(controller, q)
    return NoteOut.model_validate(controller.select_note(index))


# PUBLIC_INTERFACE
@app.get(
    "/notes/{note_id}",
    response_model=EditorStateOut,
    tags=["Notes"],
    summary="Open note in editor",
    description="Load an existing note's fields for editing.",
)
def open_note(note_id: int, store: NoteStore = Depends(get_store)) -> EditorStateOut:
    """Open a note for editing."""
    editor = NoteEditorController(store, note_id)
    return EditorStateOut(
        note_id=note_id,
        title=editor.title,
        content=editor.content,
        can_delete=editor.can_delete,
    )


# PUBLIC_INTERFACE
@app.post(
    "/notes",
    response_model=EditorOutcomeOut,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
    summary="Create note",
    description="Save a new note. The title is required after trimming whitespace.",
)
def create_note(payload: NoteFields, store: NoteStore = Depends(get_store)) -> EditorOutcomeOut:
    """Create a note."""
    outcome = NoteEditorController(store).save(payload.title, payload.content)
    return _outcome(outcome, store.get_note(outcome.note_id))


# PUBLIC_INTERFACE
@app.put(
    "/notes/{note_id}",
    response_model=EditorOutcomeOut,
    tags=["Notes"],
    summary="Update note",
    description="Overwrite an existing note's title and content and stamp a new date.",
)
def update_note(note_id: int, payload: NoteFields, store: NoteStore = Depends(get_store)) -> EditorOutcomeOut:
    """Update a note by id."""
    outcome = NoteEditorController(store, note_id).save(payload.title, payload.content)
    return _outcome(outcome, store.get_note(note_id))


# PUBLIC_INTERFACE
@app.delete(
    "/notes/{note_id}",
    response_model=EditorOutcomeOut,
    tags=["Notes"],
    summary="Delete note",
    description="Delete a note by ID.",
)
def delete_note(note_id: int, store: NoteStore = Depends(get_store)) -> EditorOutcomeOut:
    """Delete a note by id."""
    outcome = NoteEditorController(store, note_id).delete()
    return _outcome(outcome)
