# src/todolist/todos/todo_service.py

from __future__ import annotations

"""
Task service.

Sole authority for validating and applying mutations to the todos table:
- validates input before touching storage (ValidationError),
- composes one parameterized statement per operation,
- returns Todo objects, ids or affected-row counts.

"Not found" is a result here (None or a zero count), never an exception.
Storage failures surface as StorageError from the adapter, unchanged.
"""

import logging
from typing import Any

from ..core.errors import ValidationError
from ..core.ports import StoragePort
from .todo_models import Todo, TodoPatch

logger = logging.getLogger(__name__)

TEXT_REQUIRED = "Text is required"
TEXT_EMPTY = "Text cannot be empty"
NO_FIELDS = "No fields to update"

# SQLite INTEGER is a signed 64-bit value; larger ids cannot be bound.
MAX_ID = 2**63 - 1


def _clean_text(raw: Any) -> str:
    """Return trimmed text, or "" when raw is not usable as task text."""
    if not isinstance(raw, str):
        return ""
    return raw.strip()


def _storable_id(todo_id: int) -> bool:
    """Ids outside the INTEGER range can never match a row."""
    return -MAX_ID - 1 <= int(todo_id) <= MAX_ID


class TodoService:
    def __init__(self, storage: StoragePort) -> None:
        self._storage = storage

    async def list_all(self) -> list[Todo]:
        rows = await self._storage.query(
            "SELECT * FROM todos ORDER BY created_at DESC, id DESC"
        )
        return [Todo.from_row(r) for r in rows]

    async def get_by_id(self, todo_id: int) -> Todo | None:
        if not _storable_id(todo_id):
            return None
        row = await self._storage.query_one("SELECT * FROM todos WHERE id = ?", (int(todo_id),))
        return Todo.from_row(row) if row else None

    async def count(self) -> int:
        row = await self._storage.query_one("SELECT COUNT(*) AS n FROM todos")
        return int(row["n"]) if row else 0

    async def create(self, text: Any) -> int:
        clean = _clean_text(text)
        if not clean:
            raise ValidationError(TEXT_REQUIRED)

        result = await self._storage.execute(
            "INSERT INTO todos (text, completed) VALUES (?, ?)",
            (clean, 0),
        )
        if result.last_row_id is None:
            raise RuntimeError("SQLite did not return lastrowid for todos insert")
        todo_id = int(result.last_row_id)
        logger.debug("Todo created id=%s", todo_id)
        return todo_id

    async def create_and_fetch(self, text: Any) -> Todo | None:
        """
        Insert, then re-read the row so the response echoes stored timestamps.

        The two statements are not atomic: a delete landing in between
        makes this return None.
        """
        todo_id = await self.create(text)
        return await self.get_by_id(todo_id)

    async def update(self, todo_id: int, patch: TodoPatch) -> int:
        if patch.is_empty():
            raise ValidationError(NO_FIELDS)

        fields: list[str] = []
        params: list[Any] = []

        if patch.text is not None:
            clean = _clean_text(patch.text)
            if not clean:
                raise ValidationError(TEXT_EMPTY)
            fields.append("text = ?")
            params.append(clean)

        if patch.completed is not None:
            fields.append("completed = ?")
            params.append(1 if patch.completed else 0)

        if not _storable_id(todo_id):
            return 0

        fields.append("updated_at = CURRENT_TIMESTAMP")
        params.append(int(todo_id))

        sql = f"UPDATE todos SET {', '.join(fields)} WHERE id = ?"
        result = await self._storage.execute(sql, params)
        logger.debug("Todo update id=%s fields=%s changes=%s", todo_id, len(fields) - 1, result.changes)
        return result.changes

    async def delete(self, todo_id: int) -> int:
        if not _storable_id(todo_id):
            return 0
        result = await self._storage.execute("DELETE FROM todos WHERE id = ?", (int(todo_id),))
        logger.debug("Todo delete id=%s changes=%s", todo_id, result.changes)
        return result.changes

    async def delete_completed(self) -> int:
        result = await self._storage.execute("DELETE FROM todos WHERE completed = 1")
        logger.info("Deleted %s completed todos", result.changes)
        return result.changes
