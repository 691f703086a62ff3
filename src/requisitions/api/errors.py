"""HTTP error mapping for the Requisitions API.

Protean's own exceptions (validation 400, not found 404) are mapped by
``protean.integrations.fastapi``; the requisition errors are added here
with the same ``{"error": ...}`` body.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from sqlalchemy.exc import SQLAlchemyError

from requisitions.errors import PermissionDeniedError, StateConflictError, StoreError

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    PermissionDeniedError: 403,
    StateConflictError: 409,
    StoreError: 503,
}


async def _requisition_error_handler(request: Request, exc):
    return JSONResponse(status_code=_STATUS_CODES[type(exc)], content={"error": exc.messages})


async def _store_failure_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store failure", path=request.url.path, error=exc.__class__.__name__)
    return JSONResponse(status_code=503, content={"error": {"_store": ["Requisition store unavailable"]}})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_class in _STATUS_CODES:
        app.add_exception_handler(exc_class, _requisition_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_failure_handler)
