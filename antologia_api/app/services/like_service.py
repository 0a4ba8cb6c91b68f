"""
Service layer for likes.

Likes are append-only: they can be recorded and listed per anthology
entry.  Neither the existence of the entry nor duplicate likes from the
same user are checked.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, List

from antologia_api.app.core.db import row_to_dict, transaction, utcnow_iso
from antologia_api.app.schemas.common import parse_payload
from antologia_api.app.schemas.like import LikeCreate, LikeRead


class LikeService:
    """Service class for recording and listing likes."""

    @classmethod
    async def create_like(cls, conn: sqlite3.Connection, fields: Any) -> LikeRead:
        """Insert a like and return it."""
        logger = logging.getLogger(__name__)
        data = parse_payload(LikeCreate, fields, "like")
        now = utcnow_iso()
        with transaction(conn) as cursor:
            cursor.execute(
                """
                INSERT INTO likes (idantologia, userId, userEmail, createdAt, updatedAt)
                VALUES (?, ?, ?, ?, ?)
                """,
                (data.idantologia, data.userId, data.userEmail, now, now),
            )
            like_id = cursor.lastrowid
            row = cursor.execute("SELECT * FROM likes WHERE id = ?", (like_id,)).fetchone()
        logger.info("Created like %s for antologia %s", like_id, data.idantologia)
        return LikeRead(**row_to_dict(row))

    @classmethod
    async def list_likes_for_antologia(cls, conn: sqlite3.Connection, idantologia: int) -> List[LikeRead]:
        """Return all likes recorded against ``idantologia`` (possibly none)."""
        rows = conn.execute("SELECT * FROM likes WHERE idantologia = ?", (idantologia,)).fetchall()
        return [LikeRead(**row_to_dict(row)) for row in rows]
