"""Error Handlers: global exception handlers for the discovery API.

Invariants:
    - DiscoveryError → structured JSON envelope carrying the session id of the route
    - ResourceNotFoundError adds {resource: {type, id}}; SearchValidationError adds
      {field}; BulkOperationError reports its operation in the context
    - RequestValidationError → 400 with field-level details
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Log level follows the error category: lookups of missing ids are routine (info),
      rejected input is the client's problem (warning), 5xx is ours (error)
    - Session id taken from the path params: every session route carries it, and
      core errors are raised without knowing which session they belong to
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from quote_discovery.core.errors import (
    BulkOperationError, DiscoveryError, ErrorCategory, ErrorSeverity,
    ResourceNotFoundError, SearchValidationError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DiscoveryError, discovery_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


def _session_id(request: Request) -> str | None:
    return request.path_params.get("session_id")


# ─── Domain errors ──────────────────────────────────────────────

def _with_request_context(exc: DiscoveryError, request: Request) -> None:
    ctx = exc.context
    if ctx.session_id is None:
        ctx.session_id = _session_id(request)
    if ctx.operation is None and isinstance(exc, BulkOperationError):
        ctx.operation = exc.operation


def _log_discovery_error(exc: DiscoveryError, request: Request) -> None:
    if exc.category is ErrorCategory.RESOURCE_NOT_FOUND:
        log = logger.info
    elif exc.http_status < 500:
        log = logger.warning
    else:
        log = logger.error
    log(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "session_id": exc.context.session_id,
            "operation": exc.context.operation,
        },
    )


def _discovery_error_body(exc: DiscoveryError) -> dict:
    body = exc.to_response()
    error = body["error"]
    if isinstance(exc, ResourceNotFoundError):
        error["resource"] = {"type": exc.resource_type, "id": exc.resource_id}
    elif isinstance(exc, SearchValidationError):
        error["field"] = exc.field
    return body


async def discovery_error_handler(request: Request, exc: DiscoveryError):
    _with_request_context(exc, request)
    _log_discovery_error(exc, request)
    return JSONResponse(
        status_code=exc.http_status, content=_discovery_error_body(exc),
    )


# ─── Request validation ─────────────────────────────────────────

async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request body on {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"path": request.url.path, "session_id": _session_id(request)},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "context": {"session_id": _session_id(request)},
                "details": details,
            },
        },
    )


# ─── Catch-all ──────────────────────────────────────────────────

async def generic_error_handler(request: Request, exc: Exception):
    """Never leaks internal details to the client."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path, "session_id": _session_id(request)},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
