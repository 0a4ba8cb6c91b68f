"""
Anthology entry endpoints.

Entries can be created, updated, deleted and listed.  The listing
embeds the curating author's public fields and a like count; when the
store holds no entries at all it answers 404 with a ``message`` body
rather than an empty list, which existing clients rely on.
"""

import sqlite3
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from antologia_api.app.core.db import get_db
from antologia_api.app.schemas.antologia import AntologiaListItem, AntologiaRead
from antologia_api.app.schemas.common import MessageResponse
from antologia_api.app.services.antologia_service import AntologiaService

router = APIRouter()


@router.post("", response_model=AntologiaRead, status_code=status.HTTP_201_CREATED)
async def create_antologia(
    body: Any = Body(None),
    conn: sqlite3.Connection = Depends(get_db),
) -> AntologiaRead:
    """Create a new anthology entry."""
    return await AntologiaService.create_antologia(conn, body)


@router.put("/{antologia_id}", response_model=AntologiaRead)
async def update_antologia(
    antologia_id: int,
    body: Any = Body(None),
    conn: sqlite3.Connection = Depends(get_db),
) -> AntologiaRead:
    """Update an existing entry.  Partial updates are supported."""
    return await AntologiaService.update_antologia(conn, antologia_id, body)


@router.delete("/{antologia_id}", response_model=MessageResponse)
async def delete_antologia(
    antologia_id: int,
    conn: sqlite3.Connection = Depends(get_db),
) -> MessageResponse:
    """Delete an entry and the likes recorded against it."""
    await AntologiaService.delete_antologia(conn, antologia_id)
    return MessageResponse(message="Anthology deleted successfully")


@router.get("", response_model=List[AntologiaListItem])
async def list_antologias(conn: sqlite3.Connection = Depends(get_db)):
    """List all entries with author details and ``likesCount``."""
    antologias = await AntologiaService.list_antologias(conn)
    if not antologias:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "No anthologies found"},
        )
    return antologias
