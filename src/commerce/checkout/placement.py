"""Order placement — the single atomic unit of checkout.

Everything here happens in one unit of work: the cart is reloaded and
re-checked against live stock, the tenant's next order number is claimed, the
order is stored, each line's stock is conditionally decremented and the cart
is flipped to CHECKED_OUT. Any exception discards all of it.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.exceptions import (
    EmptyCartError,
    InsufficientInventoryError,
    InventoryRaceError,
    ProductUnavailableError,
)
from commerce.inventory.guard import InventoryGuard
from commerce.order.order import Order, ShippingAddress
from commerce.order.sequence import OrderSequence, format_order_number

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class PlaceOrder:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: ShippingAddress fields


@commerce.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        carts = current_domain.repository_for(Cart)
        cart = carts.find_for_user(command.tenant_id, command.user_id)
        if cart is None or not cart.is_active or not cart.items:
            raise EmptyCartError({"cart": ["Cart is empty"]})

        address = command.shipping_address
        address = ShippingAddress(**(json.loads(address) if isinstance(address, str) else address))

        products = current_domain.repository_for(Product)
        for item in cart.items:
            product = products.find_for_tenant(command.tenant_id, item.product_id)
            if product is None or not product.is_active:
                raise ProductUnavailableError({"product_id": [f"Product {item.name} is no longer available"]})
            if product.inventory < item.quantity:
                raise InsufficientInventoryError(product.name, product.inventory)

        sequence_value = current_domain.repository_for(OrderSequence).claim_next(command.tenant_id)
        order = Order.place(cart, format_order_number(sequence_value), address)
        current_domain.repository_for(Order).add(order)

        guard = InventoryGuard(command.tenant_id)
        for item in order.items:
            if not guard.reserve(item.product_id, item.quantity):
                raise InventoryRaceError(
                    {"inventory": [f"Stock for {item.name} changed while the order was being placed"]}
                )

        cart.mark_checked_out()
        carts.add(cart)

        logger.info(
            "Order placed",
            tenant_id=str(command.tenant_id),
            user_id=str(command.user_id),
            order_id=str(order.id),
            order_number=order.order_number,
            total=order.total,
        )
        return str(order.id)
