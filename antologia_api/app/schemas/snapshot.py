"""
Pydantic schemas for bulk export and import.

A snapshot is a JSON object with one list of raw rows per table.  The
keys and the row field names are the wire format of the backup files
and must not be renamed.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import require_text


class Snapshot(BaseModel):
    """Full-store export payload."""

    autores: List[Dict[str, Any]] = Field(default_factory=list)
    antologias: List[Dict[str, Any]] = Field(default_factory=list)
    likes: List[Dict[str, Any]] = Field(default_factory=list)


class AutorRow(BaseModel):
    """One ``autores`` row of a snapshot.  Unknown keys are ignored."""

    idautor: Optional[int] = None
    nombre: str
    biografia: Optional[str] = None
    urlfoto: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @field_validator("nombre")
    @classmethod
    def nombre_not_empty(cls, v: str) -> str:
        return require_text(v, "nombre")


class AntologiaRow(BaseModel):
    """One ``antologias`` row of a snapshot."""

    id: Optional[int] = None
    titulo: str
    idautor: Optional[int] = None
    contenido: Optional[str] = None
    referencia: Optional[str] = None
    tituloObra: Optional[str] = None
    autorObra: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @field_validator("titulo")
    @classmethod
    def titulo_not_empty(cls, v: str) -> str:
        return require_text(v, "titulo")


class LikeRow(BaseModel):
    """One ``likes`` row of a snapshot."""

    id: Optional[int] = None
    idantologia: Optional[int] = None
    userId: Optional[str] = None
    userEmail: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    model_config = {
        "coerce_numbers_to_str": True,
    }


class BatchResult(BaseModel):
    """Outcome of importing one entity's rows."""

    inserted: int = 0
    skipped: int = 0


class ImportResult(BaseModel):
    """Outcome of a snapshot import, per entity."""

    autores: BatchResult = Field(default_factory=BatchResult)
    antologias: BatchResult = Field(default_factory=BatchResult)
    likes: BatchResult = Field(default_factory=BatchResult)
    errors: Dict[str, str] = Field(default_factory=dict)

    @property
    def inserted(self) -> int:
        return self.autores.inserted + self.antologias.inserted + self.likes.inserted


class ImportResponse(BaseModel):
    message: str
    autores: BatchResult
    antologias: BatchResult
    likes: BatchResult
