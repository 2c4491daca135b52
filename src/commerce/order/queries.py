"""Read-side queries over a user's orders."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from commerce.order.order import Order, OrderStatus
from commerce.utils.pagination import Page, paginate

DEFAULT_ORDER_PAGE_SIZE = 10

_SORT_KEYS = {
    "created_at": lambda order: order.created_at.timestamp() if order.created_at else 0.0,
    "total": lambda order: order.total or 0.0,
}


def get_order(tenant_id, user_id, order_id) -> Order:
    return current_domain.repository_for(Order).get_for_user(tenant_id, user_id, order_id)


def list_orders(
    tenant_id,
    user_id,
    status=None,
    sort_by="created_at",
    sort_order="desc",
    page=1,
    limit=DEFAULT_ORDER_PAGE_SIZE,
) -> Page:
    if sort_by not in _SORT_KEYS:
        raise ValidationError({"sort_by": [f"sort_by must be one of {', '.join(_SORT_KEYS)}"]})
    if sort_order not in ("asc", "desc"):
        raise ValidationError({"sort_order": ["sort_order must be asc or desc"]})
    if status is not None:
        try:
            status = OrderStatus(status).value
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {status}"]}) from None

    orders = current_domain.repository_for(Order).for_user(tenant_id, user_id, status=status)
    orders.sort(key=_SORT_KEYS[sort_by], reverse=sort_order == "desc")
    return paginate(orders, page=page, limit=limit)
