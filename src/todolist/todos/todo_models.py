# src/todolist/todos/todo_models.py

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class Todo:
    id: int
    text: str
    completed: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Todo:
        return cls(
            id=int(row["id"]),
            text=str(row["text"] or ""),
            completed=bool(row["completed"]),
            created_at=str(row["created_at"] or ""),
            updated_at=str(row["updated_at"] or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(slots=True, frozen=True)
class TodoPatch:
    """
    Partial update payload.

    None means "not supplied": the field is left untouched in storage.
    """

    text: str | None = None
    completed: Any = None

    def is_empty(self) -> bool:
        return self.text is None and self.completed is None
