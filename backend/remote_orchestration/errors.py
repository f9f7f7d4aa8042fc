"""Error taxonomy and the FastAPI handlers that render it."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from remote_orchestration.utils.logging import get_logger

log = get_logger("errors")


class OrchestrationError(Exception):
    """Base exception for all remote orchestration errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(OrchestrationError):
    """A referenced host, remote or tag does not exist."""

    status_code = 404


class ValidationError(OrchestrationError):
    """Malformed ids or request bodies."""

    status_code = 400


class ConflictError(OrchestrationError):
    """An association or unique value that must not exist already does."""

    status_code = 400


class StorageError(OrchestrationError):
    """Unexpected persistence failure."""

    status_code = 500


def _payload(message: str, kind: str, errors: list | None = None) -> dict:
    body: dict = {"message": message, "type": kind}
    if errors is not None:
        body["errors"] = errors
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as a ``HandledResponseModel`` body."""

    @app.exception_handler(OrchestrationError)
    async def orchestration_error_handler(request: Request, exc: OrchestrationError):
        if exc.status_code >= 500:
            log.error("request_failed", path=str(request.url), error=exc.message, exc_info=exc)
        else:
            log.info("request_rejected", path=str(request.url), status=exc.status_code, error=exc.message)
        return ORJSONResponse(status_code=exc.status_code, content=_payload(exc.message, type(exc).__name__))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return ORJSONResponse(
            status_code=400,
            content=_payload("Invalid request", ValidationError.__name__, errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return ORJSONResponse(
            status_code=exc.status_code,
            content=_payload(message, "HTTPException"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log.error("unhandled_exception", path=str(request.url), error=str(exc), exc_info=exc)
        return ORJSONResponse(
            status_code=500,
            content=_payload("Internal server error", type(exc).__name__),
        )
