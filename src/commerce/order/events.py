"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order and its stock reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_number = String(required=True)
    total_items = Integer(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@commerce.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
