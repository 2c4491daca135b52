"""Order aggregate — the immutable record of a checked-out cart.

Line items and totals are copied verbatim from the cart at placement and are
never recalculated, whatever happens to catalogue prices or pricing rules
afterwards. Only the status moves.

Status rules:
    A CANCELLED order never changes status again.
    A DELIVERED order can only be cancelled, which the previous rule and the
    next one make impossible, so DELIVERED is terminal in practice.
    CANCELLED is only reachable from PLACED, and cancelling releases the
    order's stock back to inventory.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from commerce.domain import commerce
from commerce.order.events import OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


@commerce.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, captured at checkout and never updated."""

    name = String(required=True, max_length=255)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)


@commerce.entity(part_of="Order")
class OrderItem:
    """A cart line frozen at checkout. Prices are per unit except ``subtotal``."""

    product_id = String(required=True, max_length=255)
    sku = String(max_length=100)
    name = String(max_length=255)
    description = Text()
    image_url = String(max_length=1024)
    category = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    base_price = Float(required=True, min_value=0.0)
    final_price = Float(required=True, min_value=0.0)
    discount_amount = Float(default=0.0)
    subtotal = Float(required=True, min_value=0.0)
    applied_rules = Text()  # JSON array of rule names

    @property
    def rule_names(self) -> list[str]:
        return json.loads(self.applied_rules) if self.applied_rules else []


@commerce.aggregate
class Order:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=32)
    items = HasMany(OrderItem)
    total_items = Integer(default=0)
    subtotal = Float(default=0.0)
    total_discount = Float(default=0.0)
    total = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    shipping_address = ValueObject(ShippingAddress, required=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def place(cls, cart, order_number, shipping_address):
        """Build a PLACED order from ``cart``'s current lines and totals."""
        now = datetime.now(UTC)
        address = shipping_address
        if isinstance(shipping_address, dict):
            address = ShippingAddress(**shipping_address)

        order = cls(
            tenant_id=cart.tenant_id,
            user_id=cart.user_id,
            order_number=order_number,
            total_items=cart.total_items,
            subtotal=cart.subtotal,
            total_discount=cart.total_discount,
            total=cart.total,
            status=OrderStatus.PLACED.value,
            shipping_address=address,
            created_at=now,
            updated_at=now,
        )
        for item in cart.items:
            snapshot = item.snapshot()
            snapshot["applied_rules"] = json.dumps(snapshot["applied_rules"])
            order.add_items(OrderItem(**snapshot))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                tenant_id=str(order.tenant_id),
                user_id=str(order.user_id),
                order_number=order.order_number,
                total_items=order.total_items,
                total=order.total,
                placed_at=now,
            )
        )
        return order

    def change_status(self, new_status):
        """Move to ``new_status``. Returns True when stock must be released."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None

        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Cannot update status of cancelled order"]})
        if current == OrderStatus.DELIVERED and target != OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Cannot update status of delivered order"]})
        if target == OrderStatus.CANCELLED and current != OrderStatus.PLACED:
            raise ValidationError({"status": ["Only placed orders can be cancelled"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return target == OrderStatus.CANCELLED
