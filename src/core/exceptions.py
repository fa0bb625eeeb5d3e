"""
Exception types and handlers shared by the API layer
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException


logger = logging.getLogger(__name__)


class EntitlementDenied(Exception):
    """
    Raised when a gated action is refused by the plan entitlements

    ``body`` is the machine-readable payload returned to the client, e.g.
    ``{"code": "LIMIT_REACHED", "currentUsage": 25, "limit": 25}``.
    """

    def __init__(self, status_code: int, message: str, body: Dict[str, Any]) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.body = body


def _error_payload(message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"status": "error", "message": message}
    if extra:
        payload.update(extra)
    return payload


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def entitlement_denied_handler(request: Request, exc: EntitlementDenied) -> JSONResponse:
    logger.info(
        f"Entitlement denied on {request.method} {request.url.path}: "
        f"{exc.body.get('code')} ({exc.message})"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(exc.message, exc.body),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # No retry here; transports and callers own retries.
    logger.error(f"Backing store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_payload("Backing store unavailable"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error envelope handlers to ``app``."""
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(EntitlementDenied, entitlement_denied_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
