# tests/test_sqlite_storage.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from todolist.core.errors import StorageError
from todolist.storage.sqlite_store import SqliteStorage


@pytest.mark.asyncio
async def test_execute_reports_last_row_id_and_changes(storage: SqliteStorage) -> None:
    res = await storage.execute("INSERT INTO todos (text, completed) VALUES (?, ?)", ("a", 0))
    assert res.last_row_id == 1
    assert res.changes == 1

    res = await storage.execute("UPDATE todos SET completed = 1 WHERE id = ?", (999,))
    assert res.changes == 0


@pytest.mark.asyncio
async def test_defaults_fill_timestamps(storage: SqliteStorage) -> None:
    await storage.execute("INSERT INTO todos (text) VALUES (?)", ("a",))

    row = await storage.query_one("SELECT * FROM todos WHERE id = 1")
    assert row is not None
    assert row["completed"] == 0
    assert row["created_at"] is not None
    assert row["updated_at"] == row["created_at"]


@pytest.mark.asyncio
async def test_query_and_query_one(storage: SqliteStorage) -> None:
    for text in ("a", "b"):
        await storage.execute("INSERT INTO todos (text) VALUES (?)", (text,))

    rows = await storage.query("SELECT text FROM todos ORDER BY id")
    assert [r["text"] for r in rows] == ["a", "b"]
    assert await storage.query_one("SELECT * FROM todos WHERE id = ?", (42,)) is None


@pytest.mark.asyncio
async def test_sql_errors_become_storage_errors(storage: SqliteStorage) -> None:
    with pytest.raises(StorageError, match="no such table") as info:
        await storage.query("SELECT * FROM nope")
    assert isinstance(info.value.__cause__, sqlite3.Error)

    with pytest.raises(StorageError, match="NOT NULL"):
        await storage.execute("INSERT INTO todos (text) VALUES (NULL)")


@pytest.mark.asyncio
async def test_data_survives_reopen(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "todo.sqlite3"

    with SqliteStorage(db) as store:
        await store.execute("INSERT INTO todos (text) VALUES (?)", ("persisted",))

    assert db.exists()

    with SqliteStorage(db) as store:
        rows = await store.query("SELECT text FROM todos")
        assert [r["text"] for r in rows] == ["persisted"]


@pytest.mark.asyncio
async def test_use_after_close_fails(tmp_path: Path) -> None:
    store = SqliteStorage(tmp_path / "todo.sqlite3")
    store.open()
    store.close()
    store.close()  # idempotent

    assert not store.is_open
    with pytest.raises(StorageError, match="not open"):
        await store.query("SELECT * FROM todos")


@pytest.mark.asyncio
async def test_in_memory_database() -> None:
    with SqliteStorage(":memory:") as store:
        await store.execute("INSERT INTO todos (text) VALUES (?)", ("mem",))
        row = await store.query_one("SELECT COUNT(*) AS n FROM todos")
        assert row["n"] == 1


def test_migration_adds_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(db))
    conn.execute("CREATE TABLE todos (id INTEGER PRIMARY KEY AUTOINCREMENT, text TEXT NOT NULL)")
    conn.execute("INSERT INTO todos (text) VALUES ('legacy')")
    conn.commit()
    conn.close()

    with SqliteStorage(db):
        pass

    conn = sqlite3.connect(str(db))
    try:
        cols = {row[1] for row in conn.execute("PRAGMA table_info(todos)")}
        (text,) = conn.execute("SELECT text FROM todos").fetchone()
    finally:
        conn.close()

    assert {"completed", "created_at", "updated_at"} <= cols
    assert text == "legacy"


def test_open_failure_raises_storage_error(tmp_path: Path) -> None:
    # A directory where the database file should be.
    bad = tmp_path / "is_a_dir"
    bad.mkdir()

    store = SqliteStorage(bad)
    with pytest.raises(StorageError):
        store.open()
    assert not store.is_open


@pytest.mark.asyncio
async def test_out_of_range_integer_becomes_storage_error(storage: SqliteStorage) -> None:
    with pytest.raises(StorageError, match="too large") as info:
        await storage.query_one("SELECT * FROM todos WHERE id = ?", (10**20,))
    assert isinstance(info.value.__cause__, OverflowError)

    # The connection stays usable afterwards.
    res = await storage.execute("INSERT INTO todos (text) VALUES (?)", ("after",))
    assert res.changes == 1
