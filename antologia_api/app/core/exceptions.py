"""
Exception classes for the Antologia API.

Services raise these errors; ``main.py`` registers handlers that turn
them into JSON responses of the form ``{"error": "<message>"}``.
"""

from typing import Iterable, List


class AntologiaError(Exception):
    """Base exception for all application errors."""

    status_code = 500


class ValidationError(AntologiaError):
    """A write was attempted with missing or invalid required fields."""

    def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.fields: List[str] = list(fields)


class NotFoundError(AntologiaError):
    """The target row of an update or delete does not exist."""

    status_code = 404


class StoreError(AntologiaError):
    """Any other failure reported by the storage engine."""

    pass


class TransferError(AntologiaError):
    """A snapshot could not be imported, fully or in part."""

    pass
