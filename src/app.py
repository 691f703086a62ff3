"""Storeroom FastAPI application.

Web server for the Requisitions domain; commands are processed
synchronously per HTTP request inside the domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (projectors fire in UoW)
#   - "production" → event_processing = "async" (projectors fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from requisitions.domain import requisitions  # noqa: E402
from requisitions.utils.logging import add_context, clear_context, configure_logging  # noqa: E402

configure_logging()
requisitions.init()

_DOMAIN_PREFIXES = ("/requisitions", "/suggestions")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storeroom API",
    description="Central store requisitions — picking, delivery and receipt",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context for domain routes.

    The acting user and request path are bound to every log line emitted
    while the request is handled.
    """
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        clear_context()
        add_context(actor_id=request.headers.get("X-Actor-Id"), path=request.url.path)
        try:
            with requisitions.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from requisitions.api.errors import register_error_handlers  # noqa: E402
from requisitions.api.routes import requisition_router, suggestion_router  # noqa: E402

app.include_router(requisition_router)
app.include_router(suggestion_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"requisitions": {"name": requisitions.name}},
        }
    )
