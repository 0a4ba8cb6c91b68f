"""
Service layer for bulk export and import.

An export reads every row of the three tables into a ``Snapshot``; the
API layer streams it to the client as a JSON file.  An import inserts
authors, then anthology entries, then likes.  Each entity is imported
in its own transaction.  Every row is validated against the column
types first, so a malformed row rolls back its whole entity instead of
being stored.  Rows whose primary key already exists are skipped with
``ON CONFLICT DO NOTHING``, which leaves NOT NULL and type violations to
fail loudly.  Importing the same snapshot twice therefore inserts
nothing the second time.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from typing import Any, AsyncIterator, Dict, Tuple, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from antologia_api.app.core.db import row_to_dict, transaction, utcnow_iso
from antologia_api.app.core.exceptions import StoreError, TransferError
from antologia_api.app.schemas.snapshot import (
    AntologiaRow,
    AutorRow,
    BatchResult,
    ImportResult,
    LikeRow,
    Snapshot,
)


# (snapshot key, table name, primary key, row schema) in dependency order.
ENTITIES: Tuple[Tuple[str, str, str, Type[BaseModel]], ...] = (
    ("autores", "autores", "idautor", AutorRow),
    ("antologias", "antologias", "id", AntologiaRow),
    ("likes", "likes", "id", LikeRow),
)


class TransferService:
    """Service class for snapshot export and import."""

    @classmethod
    async def export_snapshot(cls, conn: sqlite3.Connection) -> Snapshot:
        """Return every row of every table, without joins or aggregates."""
        tables: Dict[str, list] = {}
        for key, table, _pk, _schema in ENTITIES:
            rows = conn.execute(f"SELECT * FROM {table}").fetchall()
            tables[key] = [row_to_dict(row) for row in rows]
        return Snapshot(**tables)

    @classmethod
    async def write_snapshot_file(cls, conn: sqlite3.Connection, directory: str) -> Tuple[str, str]:
        """Write a snapshot to a temporary JSON file.

        Returns the path of the file and the name the client should
        save it under, ``database_backup_<timestamp>.json``.  The caller
        is responsible for removing the file (see ``remove_export_file``).
        Raises ``TransferError`` if the file cannot be written; a
        partially written file is removed first.
        """
        logger = logging.getLogger(__name__)
        snapshot = await cls.export_snapshot(conn)
        path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                prefix="database_backup_",
                suffix=".json",
                dir=directory,
                delete=False,
            ) as fh:
                path = fh.name
                json.dump(snapshot.model_dump(), fh, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            if path is not None:
                cls.remove_export_file(path)
            raise TransferError(f"Could not write export file: {e}") from e
        filename = f"database_backup_{export_timestamp()}.json"
        logger.info(
            "Exported %s autores, %s antologias, %s likes to %s",
            len(snapshot.autores),
            len(snapshot.antologias),
            len(snapshot.likes),
            path,
        )
        return path, filename

    @staticmethod
    def remove_export_file(path: str) -> None:
        """Delete a temporary export file; failures are only logged."""
        logger = logging.getLogger(__name__)
        try:
            os.remove(path)
        except OSError as e:
            logger.warning("Could not remove export file %s: %s", path, e)

    @staticmethod
    async def read_body(stream: AsyncIterator[bytes], max_bytes: int) -> bytes:
        """Collect a request body, giving up as soon as it passes ``max_bytes``.

        Chunked uploads carry no ``Content-Length``, so the limit is
        enforced on the bytes actually received.
        """
        received = 0
        chunks = []
        async for chunk in stream:
            received += len(chunk)
            if received > max_bytes:
                raise TransferError(f"Snapshot exceeds the maximum size of {max_bytes} bytes")
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def parse_snapshot(body: bytes, max_bytes: int) -> Dict[str, Any]:
        """Decode a raw request body into a snapshot mapping.

        Raises ``TransferError`` if the body is larger than ``max_bytes``,
        is not valid JSON, or is not a JSON object.
        """
        if len(body) > max_bytes:
            raise TransferError(f"Snapshot exceeds the maximum size of {max_bytes} bytes")
        try:
            snapshot = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise TransferError(f"Snapshot is not valid JSON: {e}") from e
        if not isinstance(snapshot, dict):
            raise TransferError("Snapshot must be a JSON object")
        return snapshot

    @classmethod
    async def import_snapshot(cls, conn: sqlite3.Connection, snapshot: Any) -> ImportResult:
        """Insert the rows of ``snapshot``, skipping existing primary keys.

        Missing keys mean there is nothing to import for that entity.
        Every entity is attempted; if any of them failed a
        ``TransferError`` naming them is raised afterwards.  Entities
        imported before or after a failing one stay committed.
        """
        logger = logging.getLogger(__name__)
        if not isinstance(snapshot, dict):
            raise TransferError("Snapshot must be a JSON object")

        result = ImportResult()
        for key, table, pk, schema in ENTITIES:
            rows = snapshot.get(key)
            if rows is None:
                continue
            try:
                batch = cls._import_rows(conn, key, table, pk, schema, rows)
            except (StoreError, TransferError) as e:
                logger.error("Import of %s failed: %s", key, e)
                result.errors[key] = str(e)
                continue
            setattr(result, key, batch)
            logger.info("Imported %s: %s inserted, %s skipped", key, batch.inserted, batch.skipped)

        if result.errors:
            details = "; ".join(f"{key}: {message}" for key, message in result.errors.items())
            raise TransferError(f"Import failed for {details}")
        return result

    @staticmethod
    def _import_rows(
        conn: sqlite3.Connection,
        key: str,
        table: str,
        pk: str,
        schema: Type[BaseModel],
        rows: Any,
    ) -> BatchResult:
        """Validate and insert one entity's rows in a single transaction."""
        if not isinstance(rows, list):
            raise TransferError(f"'{key}' must be a list of rows")
        inserted = 0
        now = utcnow_iso()
        with transaction(conn) as cursor:
            for index, row in enumerate(rows):
                if not isinstance(row, dict):
                    raise TransferError(f"every entry of '{key}' must be an object")
                try:
                    values = schema.model_validate(row).model_dump(exclude_unset=True)
                except PydanticValidationError as e:
                    problems = "; ".join(
                        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
                    )
                    raise TransferError(f"row {index} of '{key}' is invalid: {problems}") from e
                # The timestamp columns are NOT NULL; fill them for hand-written snapshots.
                if values.get("createdAt") is None:
                    values["createdAt"] = now
                if values.get("updatedAt") is None:
                    values["updatedAt"] = values["createdAt"]
                column_list = ", ".join(values)
                placeholders = ", ".join("?" for _ in values)
                cursor.execute(
                    f"INSERT INTO {table} ({column_list}) VALUES ({placeholders}) "
                    f"ON CONFLICT({pk}) DO NOTHING",
                    tuple(values.values()),
                )
                inserted += cursor.rowcount
        return BatchResult(inserted=inserted, skipped=len(rows) - inserted)


def export_timestamp() -> str:
    """ISO timestamp safe for use in file names (``:`` and ``.`` replaced)."""
    return utcnow_iso().replace(":", "-").replace(".", "-")
