"""
Service layer for anthology entries.

Besides plain CRUD this module owns the listing query, which joins each
entry with its curating author's public fields and counts its likes.
The join is a LEFT JOIN: an entry whose ``idautor`` is unset or points
at a missing author is still listed, with ``Autor`` set to ``None``.

Deleting an entry also deletes its likes in the same transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, List

from antologia_api.app.core.db import row_to_dict, transaction, utcnow_iso
from antologia_api.app.core.exceptions import NotFoundError
from antologia_api.app.schemas.antologia import (
    AntologiaCreate,
    AntologiaListItem,
    AntologiaRead,
    AntologiaUpdate,
)
from antologia_api.app.schemas.autor import AutorSummary
from antologia_api.app.schemas.common import parse_payload


LIST_QUERY = """
    SELECT
        a.*,
        au.idautor AS autor_idautor,
        au.nombre AS autor_nombre,
        au.biografia AS autor_biografia,
        au.urlfoto AS autor_urlfoto,
        (SELECT COUNT(*) FROM likes l WHERE l.idantologia = a.id) AS likesCount
    FROM antologias a
    LEFT JOIN autores au ON au.idautor = a.idautor
"""


class AntologiaService:
    """Service class for managing anthology entries."""

    @classmethod
    async def create_antologia(cls, conn: sqlite3.Connection, fields: Any) -> AntologiaRead:
        """Validate ``fields`` and insert a new entry.

        ``idautor`` is stored as given without checking that the author
        exists.  Raises ``ValidationError`` when ``titulo`` is missing.
        """
        logger = logging.getLogger(__name__)
        data = parse_payload(AntologiaCreate, fields, "antologia")
        now = utcnow_iso()
        with transaction(conn) as cursor:
            cursor.execute(
                """
                INSERT INTO antologias
                    (titulo, idautor, contenido, referencia, tituloObra, autorObra, createdAt, updatedAt)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.titulo,
                    data.idautor,
                    data.contenido,
                    data.referencia,
                    data.tituloObra,
                    data.autorObra,
                    now,
                    now,
                ),
            )
            antologia_id = cursor.lastrowid
            row = cursor.execute("SELECT * FROM antologias WHERE id = ?", (antologia_id,)).fetchone()
        logger.info("Created antologia %s", antologia_id)
        return AntologiaRead(**row_to_dict(row))

    @classmethod
    async def list_antologias(cls, conn: sqlite3.Connection) -> List[AntologiaListItem]:
        """Return every entry with its author's public fields and like count.

        An empty store yields an empty list; it is up to the caller to
        decide how to report that.
        """
        rows = conn.execute(LIST_QUERY).fetchall()
        return [cls._row_to_list_item(row) for row in rows]

    @classmethod
    async def update_antologia(cls, conn: sqlite3.Connection, antologia_id: int, fields: Any) -> AntologiaRead:
        """Apply a partial update and return the refreshed entry.

        Raises ``NotFoundError`` if no entry has the given id.
        """
        logger = logging.getLogger(__name__)
        data = parse_payload(AntologiaUpdate, fields, "antologia")
        changes = data.model_dump(exclude_unset=True)
        changes["updatedAt"] = utcnow_iso()
        assignments = ", ".join(f"{column} = ?" for column in changes)
        with transaction(conn) as cursor:
            cursor.execute(
                f"UPDATE antologias SET {assignments} WHERE id = ?",
                (*changes.values(), antologia_id),
            )
            if cursor.rowcount == 0:
                logger.info("Antologia %s not found for update", antologia_id)
                raise NotFoundError("Anthology not found")
            row = cursor.execute("SELECT * FROM antologias WHERE id = ?", (antologia_id,)).fetchone()
        logger.info("Updated antologia %s", antologia_id)
        return AntologiaRead(**row_to_dict(row))

    @classmethod
    async def delete_antologia(cls, conn: sqlite3.Connection, antologia_id: int) -> None:
        """Delete an entry together with its likes.

        Raises ``NotFoundError`` if no entry has the given id; in that
        case nothing is deleted.
        """
        logger = logging.getLogger(__name__)
        with transaction(conn) as cursor:
            cursor.execute("DELETE FROM antologias WHERE id = ?", (antologia_id,))
            if cursor.rowcount == 0:
                logger.info("Antologia %s not found for deletion", antologia_id)
                raise NotFoundError("Anthology not found")
            cursor.execute("DELETE FROM likes WHERE idantologia = ?", (antologia_id,))
            likes_deleted = cursor.rowcount
        logger.info("Deleted antologia %s and %s like(s)", antologia_id, likes_deleted)

    @staticmethod
    def _row_to_list_item(row: sqlite3.Row) -> AntologiaListItem:
        """Convert a row of ``LIST_QUERY`` into a listing item."""
        autor = None
        # autor_idautor is NULL whenever the LEFT JOIN found no author
        if row["autor_idautor"] is not None:
            autor = AutorSummary(
                nombre=row["autor_nombre"],
                biografia=row["autor_biografia"],
                urlfoto=row["autor_urlfoto"],
            )
        return AntologiaListItem(
            id=row["id"],
            titulo=row["titulo"],
            idautor=row["idautor"],
            contenido=row["contenido"],
            referencia=row["referencia"],
            tituloObra=row["tituloObra"],
            autorObra=row["autorObra"],
            createdAt=row["createdAt"],
            updatedAt=row["updatedAt"],
            Autor=autor,
            likesCount=row["likesCount"],
        )
