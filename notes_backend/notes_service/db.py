import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

_MEMORY_DATABASES = (None, "", ":memory:")


def _normalize_sqlite_url(url: str) -> str:
    """
    Normalize a database location into a SQLAlchemy URL.

    Accepts:
    - any SQLAlchemy URL (sqlite:///..., postgresql+psycopg2://...)
    - :memory: for a throwaway in-memory SQLite database
    - a bare filesystem path such as ./notes.db or /var/lib/notes/notes.db

    Returns:
    - the URL unchanged, sqlite:///:memory:, or sqlite:///<absolute path> for bare paths
    """
    if "://" in url:
        return url
    if url == ":memory:":
        return "sqlite:///:memory:"
    return f"sqlite:///{Path(url).expanduser().resolve()}"


def _is_sqlite_memory(parsed: URL) -> bool:
    """True for sqlite://, sqlite:///:memory: and file URIs opened with mode=memory."""
    return parsed.database in _MEMORY_DATABASES or parsed.query.get("mode") == "memory"


def _default_sqlite_path() -> Path:
    """Return the default SQLite file: $NOTES_DATA_DIR/notes.db, else ./notes.db."""
    data_dir = (os.getenv("NOTES_DATA_DIR") or "").strip()
    base = Path(data_dir).expanduser() if data_dir else Path.cwd()
    return base / "notes.db"


def _build_database_url() -> str:
    """
    Build a SQLAlchemy database URL.

    Preference order:
    1) NOTES_DATABASE_URL (a URL, or a bare path to a SQLite file)
    2) notes.db inside NOTES_DATA_DIR, or the working directory

    Notes:
    - Do not read .env directly; runtime env is injected by the process manager.
    """
    raw = (os.getenv("NOTES_DATABASE_URL") or "").strip()
    if raw:
        return _normalize_sqlite_url(raw)
    return f"sqlite:///{_default_sqlite_path().resolve()}"


# PUBLIC_INTERFACE
def build_engine(url: str) -> Engine:
    """
    Create an engine for the given URL.

    SQLite needs two adjustments: connections may cross threads (the ASGI server
    runs sync endpoints in a threadpool), and in-memory databases must share a
    single connection or every session would see an empty database.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    if _is_sqlite_memory(parsed):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args={"check_same_thread": False})


DATABASE_URL = _build_database_url()

# Engine + session configuration
engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# PUBLIC_INTERFACE
def get_db():
    """FastAPI dependency that yields a database session and ensures it is closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
