# tests/conftest.py

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio

from todolist.storage.sqlite_store import SqliteStorage
from todolist.todos.todo_models import TodoPatch
from todolist.todos.todo_service import TodoService
from todolist.web.app import create_app


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the app.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todolist-test",
        log_level="DEBUG",
        log_to_file=False,
        host="127.0.0.1",
        port=0,
        serve_static=False,
        static_dir=tmp_path / "static",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "todo.sqlite3",
    )


@pytest.fixture()
def storage(tmp_path: Path) -> Iterator[SqliteStorage]:
    """
    Real SQLite storage on a per-test file.

    NOTE: We keep real SQLite here because the SQL composed by the service
    is part of what we want to test.
    """
    store = SqliteStorage(tmp_path / "todo.sqlite3")
    store.open()
    try:
        yield store
    finally:
        store.close()


@pytest.fixture()
def service(storage: SqliteStorage) -> TodoService:
    return TodoService(storage)


@pytest_asyncio.fixture()
async def client(service: TodoService) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(service)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture()
def make_todos(service: TodoService) -> Callable[[list[tuple[str, bool]]], Awaitable[list[int]]]:
    """Insert (text, completed) pairs in order and return their ids."""

    async def _make(items: list[tuple[str, bool]]) -> list[int]:
        ids: list[int] = []
        for text, completed in items:
            todo_id = await service.create(text)
            if completed:
                await service.update(todo_id, TodoPatch(completed=True))
            ids.append(todo_id)
        return ids

    return _make
