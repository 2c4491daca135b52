"""Order status updates — command, handler and caller-facing operation.

Cancelling a PLACED order puts every line's quantity back into stock within
the same unit of work as the status change.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.inventory.guard import InventoryGuard
from commerce.order.order import Order
from commerce.utils.permits import stock_permits

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Order")
class UpdateOrderStatus:
    tenant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@commerce.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_for_tenant(command.tenant_id, command.order_id)
        previous_status = order.status

        if order.change_status(command.status):
            guard = InventoryGuard(command.tenant_id)
            for item in order.items:
                guard.restore(item.product_id, item.quantity)

        repo.add(order)
        logger.info(
            "Order status changed",
            tenant_id=str(command.tenant_id),
            order_id=str(command.order_id),
            order_number=order.order_number,
            previous_status=previous_status,
            new_status=order.status,
        )


def update_order_status(tenant_id, order_id, status) -> Order:
    repo = current_domain.repository_for(Order)
    order = repo.get_for_tenant(tenant_id, order_id)

    keys = [(str(tenant_id), str(item.product_id)) for item in order.items]
    with stock_permits.hold_all(keys):
        current_domain.process(
            UpdateOrderStatus(tenant_id=tenant_id, order_id=order_id, status=status),
            asynchronous=False,
        )
    return repo.get_for_tenant(tenant_id, order_id)
