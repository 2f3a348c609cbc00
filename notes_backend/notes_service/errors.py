"""Error types raised by the store and the controllers."""


class NoteError(Exception):
    """Base class for every error the notes service raises on purpose."""


class ValidationError(NoteError):
    """A submitted field failed validation; nothing was persisted."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class NotFoundError(NoteError):
    """No note exists with the requested id."""

    def __init__(self, note_id: int) -> None:
        super().__init__(f"Note {note_id} not found")
        self.note_id = note_id


class StoreFailure(NoteError):
    """The underlying database rejected or failed an operation."""

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"Store operation '{operation}' failed: {cause}")
        self.operation = operation
        self.cause = cause


class EditorModeError(NoteError):
    """The requested editor action is not available in the current mode."""


class PositionOutOfRange(NoteError, IndexError):
    """A list position does not exist in the displayed notes."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Position {index} is out of range for {size} notes")
        self.index = index
        self.size = size
