from __future__ import annotations


def _create(client, title, content=""):
    r = client.post("/notes", json={"title": title, "content": content})
    assert r.status_code == 201
    return r.json()


def test_health(client) -> None:
    assert client.get("/").json() == {"message": "Healthy"}
    assert client.get("/health/db").json()["status"] == "up"


def test_create_list_update_delete(client) -> None:
    created = _create(client, "Groceries", "buy eggs")
    assert created["message"] == "Note saved"
    assert created["finished"] is True
    note_id = created["note_id"]
    assert created["note"]["title"] == "Groceries"

    opened = client.get(f"/notes/{note_id}").json()
    assert opened == {"note_id": note_id, "title": "Groceries", "content": "buy eggs", "can_delete": True}

    r = client.put(f"/notes/{note_id}", json={"title": "Groceries", "content": "buy eggs and milk"})
    assert r.status_code == 200
    assert r.json()["message"] == "Note updated"
    assert r.json()["note"]["content"] == "buy eggs and milk"

    r = client.delete(f"/notes/{note_id}")
    assert r.status_code == 200
    assert r.json()["message"] == "Note deleted"
    assert client.get("/notes").json() == []


def test_blank_title_returns_field_error(client) -> None:
    r = client.post("/notes", json={"title": "   ", "content": "x"})
    assert r.status_code == 422
    assert r.json()["field"] == "title"
    assert client.get("/notes").json() == []


def test_missing_note_is_404(client) -> None:
    assert client.get("/notes/7").status_code == 404
    assert client.put("/notes/7", json={"title": "t"}).status_code == 404
    assert client.delete("/notes/7").status_code == 404


def test_filter_and_select(client) -> None:
    _create(client, "Shopping", "milk")
    _create(client, "Work", "Buy MILK later")
    _create(client, "Ideas", "x" * 150)

    items = client.get("/notes").json()
    assert [i["title"] for i in items] == ["Shopping", "Work", "Ideas"]
    assert items[2]["content_preview"] == "x" * 100 + "..."

    filtered = client.get("/notes", params={"q": "milk"}).json()
    assert [i["title"] for i in filtered] == ["Shopping", "Work"]

    r = client.get("/notes/at/1", params={"q": "milk"})
    assert r.status_code == 200
    assert r.json()["title"] == "Work"

    assert client.get("/notes/at/5").status_code == 404


def test_store_failure_maps_to_503(client, store, monkeypatch) -> None:
    from notes_service.errors import StoreFailure

    def boom(*args):
        raise StoreFailure("get_all_notes", RuntimeError("disk gone"))

    monkeypatch.setattr(store, "get_all_notes", boom)

    r = client.get("/notes")
    assert r.status_code == 503
    assert r.json()["operation"] == "get_all_notes"
