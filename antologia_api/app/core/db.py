"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a per-request FastAPI dependency (``get_db``), a
transaction helper and the migration runner used on application start
(``init_db``).

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.  Migrations
only ever add to the schema; clearing data is the job of the reset
operation in ``services.lifecycle_service``.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Iterator, Optional

from fastapi import Request

from .config import settings
from .exceptions import StoreError


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS autores (
            idautor INTEGER PRIMARY KEY AUTOINCREMENT,
            nombre TEXT NOT NULL,
            biografia TEXT,
            urlfoto TEXT,
            createdAt TEXT NOT NULL,
            updatedAt TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS antologias (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            titulo TEXT NOT NULL,
            idautor INTEGER,
            contenido TEXT,
            referencia TEXT,
            tituloObra TEXT,
            autorObra TEXT,
            createdAt TEXT NOT NULL,
            updatedAt TEXT NOT NULL,
            FOREIGN KEY(idautor) REFERENCES autores(idautor)
        );

        CREATE TABLE IF NOT EXISTS likes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            idantologia INTEGER,
            userId TEXT,
            userEmail TEXT,
            createdAt TEXT NOT NULL,
            updatedAt TEXT NOT NULL,
            FOREIGN KEY(idantologia) REFERENCES antologias(id)
        );
        """,
    ),
    # Migration 2: index the columns used by the listing joins
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_likes_idantologia ON likes(idantologia);
        CREATE INDEX IF NOT EXISTS idx_antologias_idautor ON antologias(idautor);
        """,
    ),
]


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If the configured path is absolute (or the special ``:memory:``
    name) it is used directly.  Otherwise it is resolved relative to
    the project root.
    """
    db_url = db_url or settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` objects so columns can be
    accessed by name.  Foreign keys are declared in the schema but
    SQLite enforcement is intentionally left off: readers tolerate
    orphaned references and bulk imports may load children before
    their parents exist.
    """
    conn = sqlite3.connect(get_database_path(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


async def get_db(request: Request) -> AsyncIterator[sqlite3.Connection]:
    """FastAPI dependency yielding a connection for the current request.

    The database path is taken from ``app.state`` so that each
    application instance (and each test) can point at its own file.
    """
    conn = get_connection(getattr(request.app.state, "database_path", None))
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Cursor]:
    """Run a block of statements as a single transaction.

    Commits on success and rolls back on any error.  ``sqlite3`` errors
    are re-raised as ``StoreError``.  Nested use joins the outer
    transaction instead of committing early.
    """
    if conn.in_transaction:
        yield conn.cursor()
        return
    logger = logging.getLogger(__name__)
    cursor = conn.cursor()
    try:
        cursor.execute("BEGIN")
        yield cursor
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("Transaction rolled back: %s", e)
        raise StoreError(str(e)) from e
    except BaseException:
        conn.rollback()
        raise


def utcnow_iso() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {key: row[key] for key in row.keys()}


def init_db(conn: sqlite3.Connection) -> None:
    """Ensure the schema exists by applying pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any migrations from
    ``MIGRATIONS`` with a higher version.  Existing tables and rows are
    never dropped.
    """
    logger = logging.getLogger(__name__)
    cursor = conn.cursor()
    cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
    row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
    current_version = row["version"] if row and row["version"] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current_version:
            cursor.executescript(sql)
            cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            conn.commit()
            logger.info("Applied migration %s", version)
            current_version = version
