"""
Row-level access to the notes table.

A generic filter/order/select surface: equality filters on
whitelisted columns and a single ORDER BY column. Every database failure is
raised as StoreError.
"""

from typing import Any

import aiosqlite

from lucidnote.database.db import connect
from lucidnote.errors import NotFoundError, StoreError
from lucidnote.logging import get_logger

logger = get_logger("services.note_store")

NOTE_COLUMNS = ("id", "user_id", "title", "content", "summary", "created_at", "updated_at")


def _check_columns(columns) -> None:
    unknown = [c for c in columns if c not in NOTE_COLUMNS]
    if unknown:
        raise StoreError(f"Unknown note column(s): {', '.join(unknown)}")


def _where(filters: dict[str, Any]) -> tuple[str, list[Any]]:
    _check_columns(filters)
    if not filters:
        return "", []
    clause = " AND ".join(f"{k} = ?" for k in filters)
    return f" WHERE {clause}", list(filters.values())


class NoteStore:
    """Async SQLite table of notes."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def select(
        self,
        filters: dict[str, Any],
        order_by: str | None = "updated_at",
        descending: bool = True,
    ) -> list[dict]:
        where, params = _where(filters)
        order = ""
        if order_by:
            _check_columns([order_by])
            order = f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"
        try:
            db = await connect(self.db_path)
            try:
                cursor = await db.execute(f"SELECT * FROM notes{where}{order}", params)
                rows = await cursor.fetchall()
                return [dict(r) for r in rows]
            finally:
                await db.close()
        except aiosqlite.Error as e:
            logger.error(f"Note select failed: {e}")
            raise StoreError(str(e)) from e

    async def select_one(self, filters: dict[str, Any]) -> dict:
        rows = await self.select(filters, order_by=None)
        if not rows:
            raise NotFoundError("Note not found")
        return rows[0]

    async def insert(self, row: dict[str, Any]) -> dict:
        _check_columns(row)
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        try:
            db = await connect(self.db_path)
            try:
                await db.execute(
                    f"INSERT INTO notes ({columns}) VALUES ({placeholders})",
                    list(row.values()),
                )
                await db.commit()
            finally:
                await db.close()
        except aiosqlite.Error as e:
            logger.error(f"Note insert failed: {e}")
            raise StoreError(str(e)) from e
        return await self.select_one({"id": row["id"]})

    async def update(self, filters: dict[str, Any], fields: dict[str, Any]) -> dict:
        if not fields:
            return await self.select_one(filters)
        _check_columns(fields)
        where, params = _where(filters)
        set_clause = ", ".join(f"{k} = ?" for k in fields)
        try:
            db = await connect(self.db_path)
            try:
                cursor = await db.execute(
                    f"UPDATE notes SET {set_clause}{where}",
                    list(fields.values()) + params,
                )
                await db.commit()
                updated = cursor.rowcount
            finally:
                await db.close()
        except aiosqlite.Error as e:
            logger.error(f"Note update failed: {e}")
            raise StoreError(str(e)) from e
        if updated == 0:
            raise NotFoundError("Note not found")
        return await self.select_one(filters)

    async def delete(self, filters: dict[str, Any]) -> int:
        where, params = _where(filters)
        if not where:
            raise StoreError("Refusing to delete notes without a filter")
        try:
            db = await connect(self.db_path)
            try:
                cursor = await db.execute(f"DELETE FROM notes{where}", params)
                await db.commit()
                return cursor.rowcount
            finally:
                await db.close()
        except aiosqlite.Error as e:
            logger.error(f"Note delete failed: {e}")
            raise StoreError(str(e)) from e
