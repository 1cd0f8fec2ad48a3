"""Translation of errors into JSON error responses.

Every error leaves the API as ``{"error": <category>, "message": <text>}``,
where the category is the standard reason phrase of the status code.
"""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from article_api.api.schemas import ErrorResponse

logger = logging.getLogger(__name__)

ERROR_INVALID_ID = "invalid id"
ERROR_MALFORMED_JSON = "malformed JSON body"
ERROR_BODY_REQUIRED = "request body is required"
ERROR_INTERNAL = "Something went wrong"


class InvalidArticleIdError(Exception):
    """Raised when a path segment is not a valid article ID."""

    def __init__(self, raw_id: str) -> None:
        self.raw_id = raw_id
        super().__init__(ERROR_INVALID_ID)


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Build an error response for the given status code."""
    body = ErrorResponse(error=HTTPStatus(status_code).phrase, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def describe_validation_error(errors: list[Any]) -> str:
    """Turn the first request validation error into a short message."""
    if not errors:
        return "invalid request"

    error = errors[0]
    error_type = error.get("type")
    loc = tuple(error.get("loc", ()))
    if error_type == "json_invalid":
        return ERROR_MALFORMED_JSON
    if error_type == "missing" and loc == ("body",):
        return ERROR_BODY_REQUIRED

    if loc[:1] == ("body",):
        loc = loc[1:]
    field = ".".join(str(part) for part in loc)
    if error_type == "missing":
        return f"{field} is required"
    if error_type == "value_error":
        # Messages raised by our own validators are already user facing
        return str(error.get("msg", "")).removeprefix("Value error, ")
    if field:
        return f"{field}: {error.get('msg', 'invalid value')}"
    return str(error.get("msg", "invalid request"))


async def invalid_article_id_handler(request: Request, exc: InvalidArticleIdError) -> JSONResponse:
    return error_response(400, str(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, describe_validation_error(list(exc.errors())))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log store failures and hide their details from the caller."""
    logger.exception("Database error handling %s %s", request.method, request.url.path)
    return error_response(500, ERROR_INTERNAL)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error handling %s %s", request.method, request.url.path)
    return error_response(500, ERROR_INTERNAL)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error translators on the application."""
    app.add_exception_handler(InvalidArticleIdError, invalid_article_id_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
