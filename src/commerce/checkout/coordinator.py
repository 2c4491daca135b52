"""CheckoutCoordinator — turns a user's cart into an order exactly once.

Two phases run under the user's cart permit:

1. ``RevalidateCartPricing`` refreshes drifted prices and commits on its own.
   If anything drifted the coordinator stops with ``PricingConflictError`` so
   the buyer never pays a price they have not seen.
2. ``PlaceOrder`` runs as one unit of work while the stock permits of every
   product in the cart are held, taken in sorted order.
"""

import json

import structlog
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.checkout.placement import PlaceOrder
from commerce.checkout.revalidation import RevalidateCartPricing
from commerce.exceptions import EmptyCartError, PricingConflictError
from commerce.order.order import Order, ShippingAddress
from commerce.utils.permits import cart_permits, stock_permits

logger = structlog.get_logger(__name__)


class CheckoutCoordinator:
    def checkout(self, tenant_id, user_id, shipping_address) -> Order:
        # Reject a malformed address before touching the cart
        address = ShippingAddress(**shipping_address).to_dict()

        with cart_permits.hold(tenant_id, user_id):
            cart = current_domain.repository_for(Cart).find_for_user(tenant_id, user_id)
            if cart is None or not cart.is_active or not cart.items:
                raise EmptyCartError({"cart": ["Cart is empty"]})

            drifted = current_domain.process(
                RevalidateCartPricing(tenant_id=tenant_id, user_id=user_id),
                asynchronous=False,
            )
            if drifted:
                logger.info(
                    "Checkout stopped on pricing conflict",
                    tenant_id=str(tenant_id),
                    user_id=str(user_id),
                    product_ids=drifted,
                )
                raise PricingConflictError(drifted)

            stock_keys = [(str(tenant_id), str(item.product_id)) for item in cart.items]
            with stock_permits.hold_all(stock_keys):
                order_id = current_domain.process(
                    PlaceOrder(tenant_id=tenant_id, user_id=user_id, shipping_address=json.dumps(address)),
                    asynchronous=False,
                )

        return current_domain.repository_for(Order).get(order_id)
