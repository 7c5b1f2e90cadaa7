"""
Error envelope shared by every route.

All failures leave the API as:

    {"success": false, "error": "<message>", "details": ...}

`details` is optional. Unexpected exceptions only expose their message and
stack trace outside production.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

import asyncpg
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """
    HTTPException that knows how to render the envelope.
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        *,
        details: str | list[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=error)
        self.error = error
        self.details = details
        self.extra = extra or {}


def envelope(error: str, *, details: Any = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    body.update(extra)
    return body


def debug_details(exc: BaseException) -> dict[str, Any]:
    """
    Diagnostic fields for a 5xx body; empty in production.
    """
    if config.is_production():
        return {}
    return {
        "details": str(exc),
        "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    }


def _validation_messages(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = str(err.get("msg") or "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


async def _api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    body = envelope(exc.error, details=exc.details)
    body.update(exc.extra)
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, str):
        body = envelope(detail)
    else:
        body = envelope("Request failed", details=detail)
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = _validation_messages(exc)
    logger.info("Request validation failed: %s", messages)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope("Validation failed", details=messages),
    )


async def _unique_violation_handler(_: Request, exc: asyncpg.UniqueViolationError) -> JSONResponse:
    constraint = getattr(exc, "constraint_name", None) or "value"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope("Duplicate value", details=f"{constraint} already exists"),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope("Internal Server Error", **debug_details(exc)),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(asyncpg.UniqueViolationError, _unique_violation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
