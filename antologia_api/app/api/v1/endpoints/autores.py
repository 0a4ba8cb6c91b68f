"""
Author endpoints.

Authors can be listed, created and updated.  There is no delete route.
"""

import sqlite3
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from antologia_api.app.core.db import get_db
from antologia_api.app.schemas.autor import AutorRead
from antologia_api.app.services.autor_service import AutorService

router = APIRouter()


@router.get("", response_model=List[AutorRead])
async def list_autores(conn: sqlite3.Connection = Depends(get_db)) -> List[AutorRead]:
    return await AutorService.list_autores(conn)


@router.post("", response_model=AutorRead, status_code=status.HTTP_201_CREATED)
async def create_autor(
    body: Any = Body(None),
    conn: sqlite3.Connection = Depends(get_db),
) -> AutorRead:
    """Create a new author.  ``nombre`` is required."""
    return await AutorService.create_autor(conn, body)


@router.put("/{idautor}", response_model=AutorRead)
async def update_autor(
    idautor: int,
    body: Any = Body(None),
    conn: sqlite3.Connection = Depends(get_db),
) -> AutorRead:
    """Update an existing author.  Partial updates are supported."""
    return await AutorService.update_autor(conn, idautor, body)
