# src/todolist/storage/sqlite_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..core.errors import StorageError
from ..core.ports import MutationResult, SqlParams

logger = logging.getLogger(__name__)

T = TypeVar("T")

MEMORY_DB = ":memory:"


class SqliteStorage:
    """
    SQLite storage adapter for the todos table.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - one connection per process, opened by open() and closed by close()
    - every statement runs on a worker thread under a single lock
    """

    def __init__(self, db_path: str | Path = "todo.sqlite3") -> None:
        self._db_path = db_path if str(db_path) == MEMORY_DB else Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def db_path(self) -> str | Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        if self._conn is not None:
            return

        conn: sqlite3.Connection | None = None
        try:
            if isinstance(self._db_path, Path):
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._db_path), timeout=30.0, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            self._configure_conn(conn)
            self._ensure_schema(conn)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Error opening database %s: %s", self._db_path, exc)
            if conn is not None:
                with contextlib.suppress(sqlite3.Error):
                    conn.close()
            raise StorageError(str(exc)) from exc

        self._conn = conn
        logger.info("SqliteStorage ready db=%s", self._db_path)

    def close(self) -> None:
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            conn.close()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        logger.info("SqliteStorage closed db=%s", self._db_path)

    def __enter__(self) -> SqliteStorage:
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ---- low-level helpers ----

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        cur = conn.cursor()

        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS todos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                text TEXT NOT NULL,
                completed BOOLEAN DEFAULT 0,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

        # Migrations (safe): add missing columns.
        cur.execute("PRAGMA table_info(todos)")
        cols = {row["name"] for row in cur.fetchall()}

        def add_col(name: str, decl: str) -> None:
            if name in cols:
                return
            cur.execute(f"ALTER TABLE todos ADD COLUMN {name} {decl}")
            logger.info("SqliteStorage migration: added column %s", name)

        # ALTER TABLE cannot use a non-constant default, so old rows get NULL timestamps.
        add_col("completed", "BOOLEAN DEFAULT 0")
        add_col("created_at", "DATETIME")
        add_col("updated_at", "DATETIME")

        cur.execute("CREATE INDEX IF NOT EXISTS idx_todos_completed ON todos(completed)")
        conn.commit()

    def _run(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        with self._lock:
            conn = self._conn
            if conn is None:
                raise StorageError("Database is not open")
            try:
                return fn(conn)
            except (sqlite3.Error, OverflowError) as exc:
                # OverflowError: a Python int outside the INTEGER range was bound.
                with contextlib.suppress(sqlite3.Error):
                    conn.rollback()
                raise StorageError(str(exc)) from exc

    # ---- public API ----

    async def execute(self, sql: str, params: SqlParams = ()) -> MutationResult:
        def _do(conn: sqlite3.Connection) -> MutationResult:
            cur = conn.execute(sql, tuple(params))
            conn.commit()
            return MutationResult(last_row_id=cur.lastrowid, changes=cur.rowcount)

        return await asyncio.to_thread(self._run, _do)

    async def query(self, sql: str, params: SqlParams = ()) -> list[sqlite3.Row]:
        def _do(conn: sqlite3.Connection) -> list[sqlite3.Row]:
            return conn.execute(sql, tuple(params)).fetchall()

        return await asyncio.to_thread(self._run, _do)

    async def query_one(self, sql: str, params: SqlParams = ()) -> sqlite3.Row | None:
        def _do(conn: sqlite3.Connection) -> sqlite3.Row | None:
            return conn.execute(sql, tuple(params)).fetchone()

        return await asyncio.to_thread(self._run, _do)
