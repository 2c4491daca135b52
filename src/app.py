"""Commerce FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Each request runs inside the commerce domain context with the caller's
tenant and user bound to the structured log context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV names the running environment for protean and for logging.
from commerce.domain import commerce
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from commerce.utils.logging import add_context, clear_context

commerce.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Commerce API",
    description="Multi-tenant pricing, cart and checkout",
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
    """Push the commerce domain context and bind request identity to log lines."""
    add_context(
        tenant_id=request.headers.get("x-tenant-id"),
        user_id=request.headers.get("x-user-id"),
        path=request.url.path,
    )
    try:
        with commerce.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from commerce.api import (  # noqa: E402
    cart_router,
    order_router,
    pricing_router,
    register_commerce_exception_handlers,
)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(pricing_router)
register_commerce_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": commerce.name}})
