"""Checkout failures that callers must be able to tell apart.

All of them carry protean's ``{field: [messages]}`` payload so they render the
same way as the framework's own validation errors.
"""

from protean.exceptions import InvalidOperationError, ValidationError


class EmptyCartError(ValidationError):
    """Checkout was attempted without an active cart or without items."""


class ProductUnavailableError(ValidationError):
    """The product is missing from the catalogue or no longer active."""


class InsufficientInventoryError(ValidationError):
    """Requested quantity exceeds the product's current stock."""

    def __init__(self, product_name, available, **kwargs):
        self.product_name = product_name
        self.available = available
        super().__init__(
            {"quantity": [f"Insufficient inventory for {product_name}. Only {available} available"]},
            **kwargs,
        )


class PricingConflictError(ValidationError):
    """Cart prices drifted from the catalogue; the cart has been refreshed."""

    def __init__(self, product_ids, **kwargs):
        self.product_ids = list(product_ids)
        super().__init__(
            {"cart": ["Pricing has changed for items in your cart. Please review your cart and try again"]},
            **kwargs,
        )


class InventoryRaceError(InvalidOperationError):
    """A conditional stock decrement matched nothing inside the placement transaction."""
