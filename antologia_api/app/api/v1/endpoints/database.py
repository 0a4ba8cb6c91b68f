"""
Database maintenance endpoints.

These routes download a full JSON backup of the store, load such a
backup back in, and reset the store to its seed contents.  The export
is written to a temporary file that is removed once the response has
been sent.
"""

import sqlite3

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import FileResponse

from antologia_api.app.core.config import settings
from antologia_api.app.core.db import get_db
from antologia_api.app.core.exceptions import TransferError
from antologia_api.app.schemas.common import MessageResponse
from antologia_api.app.schemas.snapshot import ImportResponse
from antologia_api.app.services.lifecycle_service import LifecycleService
from antologia_api.app.services.transfer_service import TransferService

router = APIRouter()


@router.get("/export", response_class=FileResponse)
async def export_database(
    request: Request,
    background_tasks: BackgroundTasks,
    conn: sqlite3.Connection = Depends(get_db),
) -> FileResponse:
    """Download every author, entry and like as a JSON file."""
    export_dir = getattr(request.app.state, "export_dir", settings.export_dir)
    path, filename = await TransferService.write_snapshot_file(conn, export_dir)
    # Runs once the file has been streamed to the client.
    background_tasks.add_task(TransferService.remove_export_file, path)
    return FileResponse(
        path,
        media_type="application/json",
        filename=filename,
    )


@router.post("/import", response_model=ImportResponse)
async def import_database(request: Request, conn: sqlite3.Connection = Depends(get_db)) -> ImportResponse:
    """Load a snapshot produced by ``/database/export``.

    Rows whose id already exists are skipped.  The body is limited to
    ``settings.max_import_bytes``.
    """
    max_bytes = getattr(request.app.state, "max_import_bytes", settings.max_import_bytes)
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise TransferError(f"Snapshot exceeds the maximum size of {max_bytes} bytes")
    body = await TransferService.read_body(request.stream(), max_bytes)
    snapshot = TransferService.parse_snapshot(body, max_bytes)
    result = await TransferService.import_snapshot(conn, snapshot)
    return ImportResponse(
        message="Database imported successfully",
        autores=result.autores,
        antologias=result.antologias,
        likes=result.likes,
    )


@router.post("/reset", response_model=MessageResponse)
async def reset_database(conn: sqlite3.Connection = Depends(get_db)) -> MessageResponse:
    """Delete all data and restore the seed author and entry."""
    await LifecycleService.reset(conn)
    return MessageResponse(message="Database reset successfully")
