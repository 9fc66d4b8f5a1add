"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from lucidnote.config import settings
from lucidnote.logging import get_logger

logger = get_logger('database')


async def _table_columns(db: aiosqlite.Connection, table_name: str) -> set[str]:
    cursor = await db.execute(f"PRAGMA table_info({table_name})")
    rows = await cursor.fetchall()
    return {row[1] for row in rows}


async def _migrate_notes_add_summary(db: aiosqlite.Connection) -> None:
    # Databases created before AI summaries existed lack the column.
    note_columns = await _table_columns(db, "notes")
    if "summary" in note_columns:
        return
    logger.info("Applying migration: add notes.summary")
    await db.execute("ALTER TABLE notes ADD COLUMN summary TEXT")


async def connect(db_path: str | Path) -> aiosqlite.Connection:
    """
    Open a connection with row access by column name and foreign keys enforced.

    :param db_path: Path to the SQLite database file
    :type db_path: str | Path
    :return: Open database connection; the caller closes it
    :rtype: aiosqlite.Connection
    """
    db = await aiosqlite.connect(db_path)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA foreign_keys = ON")
    return db


async def init_db(db_path: str | Path | None = None):
    """
    Initialize database with schema.

    :param db_path: Database file; defaults to the configured DATABASE_PATH
    :type db_path: str | Path | None
    :return: None
    :rtype: None
    """
    path = Path(db_path or settings.DATABASE_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(path) as db:
        schema_path = Path(__file__).parent / "init_db.sql"
        with open(schema_path) as f:
            await db.executescript(f.read())
        await _migrate_notes_add_summary(db)
        await db.commit()
        logger.info(f"Database initialized at {path}")
