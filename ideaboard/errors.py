"""
Error taxonomy and the FastAPI handlers that render it.

Every failure leaves the service as ``{"message": "..."}`` with a status code
from the taxonomy below. Unexpected exceptions are logged with their
traceback and reported with a generic message.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class IdeaBoardError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(IdeaBoardError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotAuthenticated(IdeaBoardError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(IdeaBoardError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(IdeaBoardError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(IdeaBoardError):
    status_code = status.HTTP_409_CONFLICT


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first pydantic error into a short message naming the field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    # Discriminated unions put the variant tag in the location; keep the leaf.
    field = loc[-1] if loc else "body"
    if first.get("type") == "missing":
        return f"Missing {field}"
    return f"Invalid {field}: {first.get('msg', 'invalid value')}"


async def _idea_board_error(request: Request, exc: IdeaBoardError) -> JSONResponse:
    return _message(exc.status_code, exc.message)


async def _http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    response = _message(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _message(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


async def _integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return _message(status.HTTP_409_CONFLICT, "Conflicting record")


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(IdeaBoardError, _idea_board_error)
    app.add_exception_handler(HTTPException, _http_exception)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(IntegrityError, _integrity_error)
    app.add_exception_handler(Exception, _unexpected_error)
