"""Translate domain failures into HTTP responses."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..errors import AppError, ErrorKind, classify, validation_error
from ..security.gates import GateResult

logger = logging.getLogger(__name__)


class GateRejected(Exception):
    """Raised by gate dependencies to short-circuit a protected request.

    ``challenge`` is the auth scheme advertised in ``WWW-Authenticate`` on a 401.
    """

    def __init__(self, result: GateResult, challenge: str | None = None) -> None:
        super().__init__(result.reason)
        self.result = result
        self.challenge = challenge


def error_body(exc: AppError) -> dict[str, Any]:
    """Render an ``AppError`` as ``{error, code[, details]}``."""
    body: dict[str, Any] = {"error": exc.message, "code": exc.code}
    if exc.kind is ErrorKind.VALIDATION and exc.details is not None:
        body["details"] = exc.details
    return body


def gate_body(result: GateResult) -> tuple[int, dict[str, str]]:
    if result.internal_error:
        status_code, _ = classify(ErrorKind.INTERNAL)
        return status_code, {"error": "Internal Server Error", "message": "Authentication failed"}
    status_code, _ = classify(ErrorKind.UNAUTHORIZED)
    return status_code, {"error": "Unauthorized", "message": result.reason or ""}


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def _handle_gate_rejected(request: Request, exc: GateRejected) -> JSONResponse:
    status_code, body = gate_body(exc.result)
    headers = None
    if exc.challenge and status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": exc.challenge}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    # loc is ("body", <offset>) for unparseable JSON and ("query", <name>) for parameters
    details = [
        {
            "field": ".".join(part for part in error["loc"][1:] if isinstance(part, str)) or "body",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return await _handle_app_error(request, validation_error(details))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected error on %s %s", request.method, request.url.path)
    status_code, _ = classify(ErrorKind.INTERNAL)
    return JSONResponse(status_code=status_code, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error responders to ``app``."""
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(GateRejected, _handle_gate_rejected)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected)
