"""
Pydantic schemas for likes.

Likes are append-only.  The same user may like an entry any number of
times; nothing here deduplicates.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LikeCreate(BaseModel):
    """Schema for recording a like."""

    idantologia: Optional[int] = Field(None, example=1)
    userId: Optional[str] = Field(None, example="user-42")
    userEmail: Optional[str] = Field(None, example="lectora@example.com")

    # Clients send numeric user ids as often as string ones.
    model_config = {
        "coerce_numbers_to_str": True,
    }


class LikeRead(BaseModel):
    """Schema for reading a like from the API."""

    id: int
    idantologia: Optional[int]
    userId: Optional[str]
    userEmail: Optional[str]
    createdAt: str
    updatedAt: str
