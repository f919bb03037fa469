from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List, Optional, Tuple

from .models import TodoEntity
from .repositories import OrderedStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    seq: str = "seq"
    id: str = "id"
    title: str = "title"
    body: str = "body"
    tag: str = "tag"
    completed: str = "completed"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()


class SQLiteStorage(OrderedStorage):
    """
    Ordered map persisted in a SQLite table.

    The autoincrement `seq` column records insertion order; replacing an
    existing key updates its row so the position is kept.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()
        logger.info("SQLite storage ready db=%s total=%s", db_path, len(self))

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.seq} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.id} TEXT NOT NULL UNIQUE,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.body} TEXT NOT NULL,
                    {_COLS.tag} TEXT NOT NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} INTEGER NOT NULL,
                    {_COLS.updated_at} INTEGER NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_tag ON {_COLS.table}({_COLS.tag})"
            )

    @staticmethod
    def _row_to_entity(row: sqlite3.Row) -> TodoEntity:
        updated = row[_COLS.updated_at]
        return {
            "id": str(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "body": str(row[_COLS.body]),
            "tag": str(row[_COLS.tag]),
            "completed": bool(row[_COLS.completed]),
            "created_at": int(row[_COLS.created_at]),
            "updated_at": int(updated) if updated is not None else None,
        }

    def __len__(self) -> int:
        with self._conn() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS cnt FROM {_COLS.table}").fetchone()
            return int(row["cnt"]) if row else 0

    def get(self, key: str) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (key,)
            ).fetchone()
            return self._row_to_entity(row) if row else None

    def insert(self, key: str, value: TodoEntity) -> None:
        params = (
            value["title"],
            value["body"],
            value["tag"],
            1 if value["completed"] else 0,
            value["created_at"],
            value["updated_at"],
            key,
        )
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.body} = ?, {_COLS.tag} = ?, {_COLS.completed} = ?,
                    {_COLS.created_at} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                params,
            )
            if cur.rowcount == 0:
                conn.execute(
                    f"""
                    INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.body}, {_COLS.tag},
                        {_COLS.completed}, {_COLS.created_at}, {_COLS.updated_at}, {_COLS.id})
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    params,
                )

    def remove(self, key: str) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (key,)
            ).fetchone()
            if row is None:
                return None
            conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (key,))
            return self._row_to_entity(row)

    def items(self) -> List[Tuple[str, TodoEntity]]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.seq} ASC"
            ).fetchall()
            return [(str(r[_COLS.id]), self._row_to_entity(r)) for r in rows]
