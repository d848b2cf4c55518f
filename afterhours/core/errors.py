"""
Error taxonomy for refresh and directory operations, and the mapping of
those errors onto HTTP responses so routes stay thin.
"""
from typing import List, Tuple, Type

from fastapi import HTTPException, status


class DirectoryError(Exception):
    """Base class for errors raised by directory services."""

    code = "INTERNAL_ERROR"


class ConfigurationError(DirectoryError):
    """Missing or placeholder credentials. Fatal for any refresh, never retried."""

    code = "INVALID_API_KEY"


class ProviderError(DirectoryError):
    """The external place-data call failed or returned a non-success status."""

    code = "API_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CityNotFoundError(DirectoryError):
    """The caller asked for a city that is not in the reference table."""

    code = "CITY_NOT_FOUND"

    def __init__(self, slug: str):
        super().__init__(f"City not found: {slug}")
        self.slug = slug


class StateNotFoundError(DirectoryError):
    """No reference city belongs to the requested state."""

    code = "STATE_NOT_FOUND"

    def __init__(self, slug: str):
        super().__init__(f"State not found: {slug}")
        self.slug = slug


# (exception type, HTTP status). First match wins.
ERROR_RULES: List[Tuple[Type[DirectoryError], int]] = [
    (CityNotFoundError, status.HTTP_404_NOT_FOUND),
    (StateNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
]


def error_to_http(exc: DirectoryError) -> HTTPException:
    """
    Map a directory error onto an HTTPException.

    The detail carries both the message and a stable machine-readable code.
    """
    for exc_type, status_code in ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(
                status_code=status_code,
                detail={"error": str(exc), "code": exc.code},
            )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": str(exc), "code": exc.code},
    )


def describe_error(exc: Exception) -> str:
    """Short message for progress events and error lists."""
    message = str(exc)
    return message if message else exc.__class__.__name__
