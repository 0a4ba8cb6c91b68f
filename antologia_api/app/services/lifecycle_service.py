"""
Service layer for the database lifecycle.

``initialize`` prepares the schema and inserts the seed author and seed
anthology entry when the store is empty.  ``reset`` clears every table
(likes first, then entries, then authors), restarts the id sequences
and reseeds.  Reset runs as a single transaction: if any step fails
the store is left as it was and the error propagates to the caller.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict

from antologia_api.app.core.db import init_db, transaction
from antologia_api.app.services.antologia_service import AntologiaService
from antologia_api.app.services.autor_service import AutorService


SEED_AUTOR: Dict[str, Any] = {
    "nombre": "Ada Aurora Sánchez Peña",
    "biografia": "Investigadora y académica de la Universidad de Colima",
    "urlfoto": "https://example.com/default-author-image.png",
}

SEED_ANTOLOGIA: Dict[str, Any] = {
    "titulo": "Primera Antología",
    "contenido": "Contenido de ejemplo de la primera antología",
    "referencia": "Referencia de ejemplo",
    "tituloObra": "Obra de ejemplo",
    "autorObra": "Autor de la obra de ejemplo",
}

# Deletion order follows the foreign keys: children before parents.
RESET_ORDER = ("likes", "antologias", "autores")


class LifecycleService:
    """Schema initialisation, seeding and full reset."""

    @classmethod
    async def initialize(cls, conn: sqlite3.Connection) -> None:
        """Apply pending migrations and seed an empty store.

        Safe to call repeatedly: existing rows are never touched and no
        seed is inserted twice.
        """
        init_db(conn)
        with transaction(conn):
            await cls._seed(conn)

    @classmethod
    async def reset(cls, conn: sqlite3.Connection) -> None:
        """Delete all rows, restart id sequences and reseed."""
        logger = logging.getLogger(__name__)
        init_db(conn)
        with transaction(conn) as cursor:
            for table in RESET_ORDER:
                cursor.execute(f"DELETE FROM {table}")
                logger.info("Cleared %s (%s rows)", table, cursor.rowcount)
            placeholders = ", ".join("?" for _ in RESET_ORDER)
            cursor.execute(f"DELETE FROM sqlite_sequence WHERE name IN ({placeholders})", RESET_ORDER)
            await cls._seed(conn)
        logger.info("Database reset completed")

    @classmethod
    async def _seed(cls, conn: sqlite3.Connection) -> None:
        """Insert the default author and entry where their tables are empty.

        Must be called inside an open transaction.
        """
        logger = logging.getLogger(__name__)
        autor_count = conn.execute("SELECT COUNT(*) FROM autores").fetchone()[0]
        if autor_count == 0:
            await AutorService.create_autor(conn, SEED_AUTOR)
            logger.info("Default author created")

        antologia_count = conn.execute("SELECT COUNT(*) FROM antologias").fetchone()[0]
        if antologia_count == 0:
            row = conn.execute("SELECT idautor FROM autores ORDER BY idautor LIMIT 1").fetchone()
            if row:
                await AntologiaService.create_antologia(conn, {**SEED_ANTOLOGIA, "idautor": row["idautor"]})
                logger.info("Default anthology created")
