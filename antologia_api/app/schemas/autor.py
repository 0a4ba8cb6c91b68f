"""
Pydantic schemas for authors.

An author is the curator of anthology entries.  Only ``nombre`` is
required; biography and photo URL are free text.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import require_text


class AutorBase(BaseModel):
    nombre: str = Field(..., example="Ada Aurora Sánchez Peña")
    biografia: Optional[str] = Field(None, example="Investigadora y académica")
    urlfoto: Optional[str] = Field(None, example="https://example.com/autora.png")


class AutorCreate(AutorBase):
    """Schema for creating an author."""

    @field_validator("nombre")
    @classmethod
    def nombre_not_empty(cls, v: str) -> str:
        return require_text(v, "nombre")


class AutorUpdate(BaseModel):
    """Schema for updating an author.

    All fields are optional; only provided fields will be updated.  An
    explicit ``null`` or blank ``nombre`` is rejected.
    """

    nombre: Optional[str] = None
    biografia: Optional[str] = None
    urlfoto: Optional[str] = None

    @field_validator("nombre")
    @classmethod
    def nombre_not_empty(cls, v: Optional[str]) -> str:
        return require_text(v, "nombre")


class AutorRead(AutorBase):
    """Schema for reading an author from the API."""

    idautor: int
    createdAt: str
    updatedAt: str

    model_config = {
        "from_attributes": True,
    }


class AutorSummary(BaseModel):
    """Public author fields embedded in anthology listings."""

    nombre: Optional[str] = None
    biografia: Optional[str] = None
    urlfoto: Optional[str] = None
