"""
Domain error taxonomy and the FastAPI handlers that render it.

Every error is rendered with the same envelope the CSRF middleware uses:
{"error": {"code": ..., "message": ..., "status": ..., "details": ...}}
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

log = structlog.get_logger()


class MarketplaceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details

    def to_body(self) -> dict:
        body: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "status": self.status_code,
        }
        if self.details is not None:
            body["details"] = self.details
        return {"error": body}


class ValidationError(MarketplaceError):
    """Malformed or out-of-range input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictError(MarketplaceError):
    """Uniqueness violation, e.g. a duplicate username or email."""

    status_code = 400
    code = "CONFLICT"


class AuthenticationError(MarketplaceError):
    status_code = 401
    code = "UNAUTHENTICATED"


class AuthorizationError(MarketplaceError):
    """Role, ownership or state mismatch."""

    status_code = 403
    code = "FORBIDDEN"


class InvalidTransition(AuthorizationError):
    code = "INVALID_TRANSITION"


class QuotaExceeded(MarketplaceError):
    status_code = 403
    code = "QUOTA_EXCEEDED"


class NotFoundError(MarketplaceError):
    status_code = 404
    code = "NOT_FOUND"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def _marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    log.info(
        "request.rejected",
        path=request.url.path,
        method=request.method,
        code=exc.code,
        status=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    error = ValidationError("Request validation failed", details=fields)
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "status": 500,
            }
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, _marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
