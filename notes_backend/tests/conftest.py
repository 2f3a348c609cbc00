from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from notes_service.api.main import app, get_store
from notes_service.db import build_engine, get_db
from notes_service.store import NoteStore


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite://")
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def store(session_factory) -> NoteStore:
    note_store = NoteStore(session_factory)
    note_store.create_schema()
    return note_store


@pytest.fixture()
def clock():
    return lambda: datetime(2024, 3, 5, 14, 7)


@pytest.fixture()
def client(store, session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
