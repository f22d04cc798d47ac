# src/todolist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage.sqlite_store import SqliteStorage
from ..todos.todo_service import TodoService


@dataclass
class AppState:
    # Settings are kept on the state so the entrypoint can read host/port/static dir.
    settings: Any

    storage: SqliteStorage
    todo_service: TodoService
