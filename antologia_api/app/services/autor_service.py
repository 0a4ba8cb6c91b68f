"""
Service layer for authors.

Authors are created, listed and updated; there is intentionally no
delete operation since anthology entries keep referring to them.  Every
method takes the connection handle to operate on, which keeps the
service free of global state and lets tests use their own database.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, List

from antologia_api.app.core.db import row_to_dict, transaction, utcnow_iso
from antologia_api.app.core.exceptions import NotFoundError
from antologia_api.app.schemas.autor import AutorCreate, AutorRead, AutorUpdate
from antologia_api.app.schemas.common import parse_payload


class AutorService:
    """Service class for managing authors."""

    @classmethod
    async def create_autor(cls, conn: sqlite3.Connection, fields: Any) -> AutorRead:
        """Validate ``fields`` and insert a new author.

        Raises ``ValidationError`` when ``nombre`` is missing or blank.
        """
        logger = logging.getLogger(__name__)
        data = parse_payload(AutorCreate, fields, "autor")
        now = utcnow_iso()
        with transaction(conn) as cursor:
            cursor.execute(
                """
                INSERT INTO autores (nombre, biografia, urlfoto, createdAt, updatedAt)
                VALUES (?, ?, ?, ?, ?)
                """,
                (data.nombre, data.biografia, data.urlfoto, now, now),
            )
            idautor = cursor.lastrowid
            row = cursor.execute("SELECT * FROM autores WHERE idautor = ?", (idautor,)).fetchone()
        logger.info("Created autor %s", idautor)
        return AutorRead(**row_to_dict(row))

    @classmethod
    async def list_autores(cls, conn: sqlite3.Connection) -> List[AutorRead]:
        """Return all authors in the store's natural order."""
        rows = conn.execute("SELECT * FROM autores").fetchall()
        return [AutorRead(**row_to_dict(row)) for row in rows]

    @classmethod
    async def update_autor(cls, conn: sqlite3.Connection, idautor: int, fields: Any) -> AutorRead:
        """Apply a partial update and return the refreshed author.

        Only keys present in ``fields`` are written.  Raises
        ``NotFoundError`` if no author has the given id.
        """
        logger = logging.getLogger(__name__)
        data = parse_payload(AutorUpdate, fields, "autor")
        changes = data.model_dump(exclude_unset=True)
        changes["updatedAt"] = utcnow_iso()
        assignments = ", ".join(f"{column} = ?" for column in changes)
        with transaction(conn) as cursor:
            cursor.execute(
                f"UPDATE autores SET {assignments} WHERE idautor = ?",
                (*changes.values(), idautor),
            )
            if cursor.rowcount == 0:
                logger.info("Autor %s not found for update", idautor)
                raise NotFoundError("Author not found")
            row = cursor.execute("SELECT * FROM autores WHERE idautor = ?", (idautor,)).fetchone()
        logger.info("Updated autor %s", idautor)
        return AutorRead(**row_to_dict(row))
