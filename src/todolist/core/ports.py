# src/todolist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the service layer.

The service depends on a Protocol instead of the concrete SQLite adapter.
This keeps the store swappable and lets tests inject failing fakes.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

SqlParams = Sequence[Any]


@dataclass(slots=True, frozen=True)
class MutationResult:
    """What a single INSERT/UPDATE/DELETE statement reports back."""

    last_row_id: int | None
    changes: int


class StoragePort(Protocol):
    """Relational store reachable through "execute mutation" and "run query"."""

    async def execute(self, sql: str, params: SqlParams = ()) -> MutationResult: ...

    async def query(self, sql: str, params: SqlParams = ()) -> list[Any]: ...

    async def query_one(self, sql: str, params: SqlParams = ()) -> Any | None: ...
