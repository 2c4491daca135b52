"""Commerce bounded context — tenant-scoped pricing, shopping carts and checkout.

Prices cart lines through the pricing-rule engine, keeps consolidated cart
totals, and converts a cart into an immutable order exactly once while
reserving inventory atomically.
"""

from protean.domain import Domain

from commerce.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
commerce = Domain(name="commerce")
