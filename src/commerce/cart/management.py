"""Cart lifecycle — reclaim and clear."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.domain import commerce

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Cart")
class ReclaimCart:
    """Make sure the user has an ACTIVE cart, reopening a checked-out one.

    Idempotent: an already active cart is left untouched.
    """

    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)


@commerce.command(part_of="Cart")
class ClearCart:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)


@commerce.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(ReclaimCart)
    def reclaim_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.find_for_user(command.tenant_id, command.user_id)

        if cart is None:
            cart = Cart.create(tenant_id=command.tenant_id, user_id=command.user_id)
            repo.add(cart)
            logger.debug("Cart opened", tenant_id=str(command.tenant_id), user_id=str(command.user_id))
        elif cart.reclaim():
            repo.add(cart)
            logger.info("Checked-out cart reclaimed", tenant_id=str(command.tenant_id), user_id=str(command.user_id))

        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.find_for_user(command.tenant_id, command.user_id)

        # Nothing to clear is not an error
        if cart is None or not cart.is_active or not cart.items:
            return

        cart.clear()
        repo.add(cart)
        logger.info("Cart cleared", tenant_id=str(command.tenant_id), user_id=str(command.user_id))
