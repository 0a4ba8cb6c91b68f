"""
Top‑level router for version 1 of the API.

This router aggregates the resource routers under their public
prefixes.  When new resources are introduced, update this file to
include their routers.
"""

from fastapi import APIRouter

from .endpoints import antologias, autores, database, likes

router = APIRouter()

router.include_router(database.router, prefix="/database", tags=["database"])
router.include_router(antologias.router, prefix="/antologia", tags=["antologia"])
router.include_router(autores.router, prefix="/autores", tags=["autores"])
router.include_router(likes.router, prefix="/like", tags=["likes"])
