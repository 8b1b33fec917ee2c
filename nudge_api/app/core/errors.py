"""
Error types raised by the service layer.

Services raise these exceptions and the endpoint modules translate them
into ``HTTPException`` with the same status code and message.  Every
error reaching the client is rendered as ``{"error": <message>}`` by the
handlers in ``core/error_handlers.py``.
"""

from fastapi import HTTPException


class ApiError(ValueError):
    """Base class for expected request failures."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.message)


class InvalidIdentifierError(ApiError):
    """An identifier is not a 24 character hexadecimal string."""

    status_code = 400


class ResourceNotFoundError(ApiError):
    status_code = 404


class NoChangesError(ApiError):
    """An update request would not change the stored document."""

    status_code = 400
