"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from commerce.domain import commerce
from commerce.order.order import Order

# Upper bound for unpaginated scans of a user's orders
SCAN_LIMIT = 10_000


@commerce.repository(part_of=Order)
class OrderRepository:
    def for_user(self, tenant_id, user_id, status=None) -> list[Order]:
        filters = {"tenant_id": str(tenant_id), "user_id": str(user_id)}
        if status is not None:
            filters["status"] = status
        return self._dao.query.filter(**filters).limit(SCAN_LIMIT).all().items

    def get_for_tenant(self, tenant_id, order_id) -> Order:
        order = self.get(order_id)
        if str(order.tenant_id) != str(tenant_id):
            raise ObjectNotFoundError({"order_id": [f"Order {order_id} not found"]})
        return order

    def get_for_user(self, tenant_id, user_id, order_id) -> Order:
        order = self.get_for_tenant(tenant_id, order_id)
        if str(order.user_id) != str(user_id):
            raise ObjectNotFoundError({"order_id": [f"Order {order_id} not found"]})
        return order
