"""Error taxonomy and its JSON rendering.

Services raise these before mutating the datastore or broadcasting anything, so
a failed request never leaves a half-applied change or a stray push frame.
Every error response has the shape `{"error", "code", "type", "details"?}`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)


class CampusHubException(Exception):
    """Base exception; translated to a JSON response by the registered handlers."""

    status_code: int = 400
    default_code: str | None = None
    headers: dict[str, str] | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.status_code
        self.details = details
        super().__init__(message)


class NotFoundError(CampusHubException):
    """A referenced group, message, post, event, notification or user is absent."""

    status_code = 404
    default_code = "not_found"


class ForbiddenError(CampusHubException):
    """A membership or role check failed."""

    status_code = 403
    default_code = "forbidden"


class ValidationFailedError(CampusHubException):
    status_code = 400
    default_code = "validation_failed"


class AuthenticationError(CampusHubException):
    """Missing, invalid or expired bearer token, or bad credentials."""

    status_code = 401
    default_code = "unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


def error_response(
    status_code: int,
    *,
    error: str,
    code: str | None,
    type_: str,
    details: Any | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": error, "code": code, "type": type_}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CampusHubException)
    async def _campushub_exception_handler(
        _request: Request, exc: CampusHubException
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.__class__.__name__, exc.message)
        return error_response(
            exc.status_code,
            error=exc.message,
            code=exc.code,
            type_=exc.__class__.__name__,
            details=exc.details,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Validator errors can carry exception objects in `ctx`; drop them.
        errors = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
        return error_response(
            HTTP_422_UNPROCESSABLE_ENTITY,
            error="Validation error",
            code="validation_error",
            type_=exc.__class__.__name__,
            details=errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        return error_response(
            exc.status_code,
            error=detail if isinstance(detail, str) else "Request failed",
            code="http_exception",
            type_=exc.__class__.__name__,
            details=None if isinstance(detail, str) else detail,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception: %s", exc)
        return error_response(
            HTTP_500_INTERNAL_SERVER_ERROR,
            error="Internal server error",
            code="internal_error",
            type_="InternalServerError",
        )


__all__ = [
    "AuthenticationError",
    "CampusHubException",
    "ForbiddenError",
    "NotFoundError",
    "ValidationFailedError",
    "error_response",
    "register_exception_handlers",
]
