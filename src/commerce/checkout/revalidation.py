"""Checkout price revalidation — command and handler.

Runs in its own unit of work ahead of order placement. Any line whose stored
per-unit prices no longer match a fresh pricing of the live product is
refreshed and the cart totals recomputed. The refresh is committed even though
the checkout attempt that triggered it is then rejected, so the buyer sees the
new prices and a retry goes through.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.exceptions import EmptyCartError, ProductUnavailableError
from commerce.pricing.engine import PricingEngine

logger = structlog.get_logger(__name__)

# Prices are compared at cent precision
PRICE_PRECISION = 2


def _drifted(item, product, breakdown):
    fresh_unit_price = breakdown.final_price / item.quantity
    return round(item.final_price, PRICE_PRECISION) != round(fresh_unit_price, PRICE_PRECISION) or round(
        item.base_price, PRICE_PRECISION
    ) != round(product.price, PRICE_PRECISION)


@commerce.command(part_of="Cart")
class RevalidateCartPricing:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)


@commerce.command_handler(part_of=Cart)
class RevalidateCartPricingHandler:
    @handle(RevalidateCartPricing)
    def revalidate(self, command):
        """Returns the product ids whose prices were refreshed."""
        repo = current_domain.repository_for(Cart)
        cart = repo.find_for_user(command.tenant_id, command.user_id)
        if cart is None or not cart.is_active or not cart.items:
            raise EmptyCartError({"cart": ["Cart is empty"]})

        products = current_domain.repository_for(Product)
        engine = PricingEngine(command.tenant_id)

        drifted = []
        for item in list(cart.items):
            product = products.find_for_tenant(command.tenant_id, item.product_id)
            if product is None or not product.is_active:
                raise ProductUnavailableError({"product_id": [f"Product {item.name} is no longer available"]})

            breakdown = engine.price_product(product, item.quantity)
            if _drifted(item, product, breakdown):
                cart.reprice_item(product, breakdown)
                drifted.append(str(item.product_id))

        if drifted:
            cart.record_repricing(drifted)
            repo.add(cart)
            logger.warning(
                "Cart prices drifted from catalogue",
                tenant_id=str(command.tenant_id),
                user_id=str(command.user_id),
                product_ids=drifted,
                cart_total=cart.total,
            )

        return drifted
