"""
Application-wide error rendering.

Every error leaving the API has the body ``{"error": <message>}``.
Expected failures arrive as ``HTTPException`` raised by the routes;
anything else is caught by ``catch_unhandled_errors``, logged with its
traceback and turned into a generic 500 so no internals reach clients.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        # Router misses carry Starlette's stock detail.
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Endpoint not found"
        return error_response(exc.status_code, str(message), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
