"""Commerce domain API package."""

from commerce.api.errors import register_commerce_exception_handlers
from commerce.api.routes import cart_router, order_router, pricing_router

__all__ = ["cart_router", "order_router", "pricing_router", "register_commerce_exception_handlers"]
