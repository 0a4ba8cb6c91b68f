"""
Pydantic models for anthology entries.

An entry quotes or collects a piece of work.  ``titulo`` is required;
``referencia``, ``tituloObra`` and ``autorObra`` record where the
anthologized material comes from, which is independent of the curating
author referenced by ``idautor``.  Listings additionally carry the
curating author's public fields and a computed ``likesCount``.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .autor import AutorSummary
from .common import require_text


class AntologiaBase(BaseModel):
    titulo: str = Field(..., example="Primera Antología")
    idautor: Optional[int] = Field(None, example=1)
    contenido: Optional[str] = Field(None, example="Contenido de ejemplo")
    referencia: Optional[str] = Field(None, example="Referencia de ejemplo")
    tituloObra: Optional[str] = Field(None, example="Obra de ejemplo")
    autorObra: Optional[str] = Field(None, example="Autor de la obra de ejemplo")


class AntologiaCreate(AntologiaBase):
    """Schema for creating an anthology entry.

    ``idautor`` is stored as given; it is not checked against the
    authors table.
    """

    @field_validator("titulo")
    @classmethod
    def titulo_not_empty(cls, v: str) -> str:
        return require_text(v, "titulo")


class AntologiaUpdate(BaseModel):
    """Schema for updating an anthology entry.

    All fields are optional; only provided fields will be updated.
    """

    titulo: Optional[str] = None
    idautor: Optional[int] = None
    contenido: Optional[str] = None
    referencia: Optional[str] = None
    tituloObra: Optional[str] = None
    autorObra: Optional[str] = None

    @field_validator("titulo")
    @classmethod
    def titulo_not_empty(cls, v: Optional[str]) -> str:
        return require_text(v, "titulo")


class AntologiaRead(AntologiaBase):
    """Schema for reading a stored anthology entry."""

    id: int
    createdAt: str
    updatedAt: str

    model_config = {
        "from_attributes": True,
    }


class AntologiaListItem(AntologiaRead):
    """Entry as returned by the listing endpoint.

    ``Autor`` is ``None`` when ``idautor`` is unset or points at an
    author that no longer exists.
    """

    Autor: Optional[AutorSummary] = None
    likesCount: int = 0
