"""
Like endpoints.
"""

import sqlite3
from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from antologia_api.app.core.db import get_db
from antologia_api.app.schemas.like import LikeRead
from antologia_api.app.services.like_service import LikeService

router = APIRouter()


@router.post("", response_model=LikeRead, status_code=status.HTTP_201_CREATED)
async def create_like(
    body: Any = Body(None),
    conn: sqlite3.Connection = Depends(get_db),
) -> LikeRead:
    """Record a like.  Repeated likes from the same user are all kept."""
    return await LikeService.create_like(conn, body)


@router.get("/{idantologia}", response_model=List[LikeRead])
async def list_likes(idantologia: int, conn: sqlite3.Connection = Depends(get_db)) -> List[LikeRead]:
    """List the likes of one entry; an empty list if it has none."""
    return await LikeService.list_likes_for_antologia(conn, idantologia)
