"""HTTP mapping for commerce exceptions.

protean's handlers cover the framework exceptions (validation → 400,
not found → 404). The handlers registered here take precedence for the
checkout-specific subclasses because Starlette resolves handlers along the
exception's MRO.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from commerce.exceptions import InsufficientInventoryError, InventoryRaceError, PricingConflictError

logger = structlog.get_logger(__name__)


async def _insufficient_inventory(request: Request, exc: InsufficientInventoryError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": exc.messages})


async def _pricing_conflict(request: Request, exc: PricingConflictError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": exc.messages, "product_ids": exc.product_ids},
    )


async def _inventory_race(request: Request, exc: InventoryRaceError) -> JSONResponse:
    logger.error("Checkout aborted by concurrent stock change", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=500,
        content={"error": {"checkout": ["Failed to process order. Please try again"]}},
    )


def register_commerce_exception_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(InsufficientInventoryError, _insufficient_inventory)
    app.add_exception_handler(PricingConflictError, _pricing_conflict)
    app.add_exception_handler(InventoryRaceError, _inventory_race)
