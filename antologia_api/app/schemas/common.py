"""
Helpers shared by the schema modules.
"""

from typing import Any, Type, TypeVar

import pydantic
from pydantic import BaseModel

from antologia_api.app.core.exceptions import ValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)


class MessageResponse(BaseModel):
    """Plain informational response body."""

    message: str


def parse_payload(schema: Type[ModelT], payload: Any, entity: str) -> ModelT:
    """Validate ``payload`` against ``schema``.

    Raises ``ValidationError`` listing every offending field instead of
    pydantic's own exception so the API layer can report it uniformly.
    """
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) or "body" for err in e.errors()]
        details = ", ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'} ({err['msg']})" for err in e.errors()
        )
        raise ValidationError(f"Invalid {entity} payload: {details}", fields=fields) from e


def require_text(value: Any, field: str) -> str:
    """Reject ``None`` and blank strings for a required text column."""
    if value is None or not str(value).strip():
        raise ValueError(f"{field} cannot be empty")
    return value
