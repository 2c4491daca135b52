"""Cart item management — commands and handler.

Every line change is priced through the tenant's PricingEngine against the
live product, so stored prices always reflect the rules in force at the time
of the write.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.pricing.engine import PricingEngine

logger = structlog.get_logger(__name__)


@commerce.command(part_of="Cart")
class AddToCart:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    product_id = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)


@commerce.command(part_of="Cart")
class UpdateCartItemQuantity:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    product_id = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)


@commerce.command(part_of="Cart")
class RemoveFromCart:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    product_id = String(required=True, max_length=255)


@commerce.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        product = current_domain.repository_for(Product).get_for_tenant(command.tenant_id, command.product_id)

        cart = repo.find_for_user(command.tenant_id, command.user_id)
        if cart is None:
            cart = Cart.create(tenant_id=command.tenant_id, user_id=command.user_id)

        cart.add_item(product, command.quantity, PricingEngine(command.tenant_id).price_product)
        repo.add(cart)

        logger.info(
            "Item added to cart",
            tenant_id=str(command.tenant_id),
            user_id=str(command.user_id),
            product_id=command.product_id,
            quantity=command.quantity,
            cart_total=cart.total,
        )
        return str(cart.id)

    @handle(UpdateCartItemQuantity)
    def update_cart_item_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_for_user(command.tenant_id, command.user_id)
        product = current_domain.repository_for(Product).get_for_tenant(command.tenant_id, command.product_id)

        cart.update_item_quantity(product, command.quantity, PricingEngine(command.tenant_id).price_product)
        repo.add(cart)

        logger.info(
            "Cart item quantity updated",
            tenant_id=str(command.tenant_id),
            user_id=str(command.user_id),
            product_id=command.product_id,
            quantity=command.quantity,
        )

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_for_user(command.tenant_id, command.user_id)
        cart.remove_item(command.product_id)
        repo.add(cart)

        logger.info(
            "Item removed from cart",
            tenant_id=str(command.tenant_id),
            user_id=str(command.user_id),
            product_id=command.product_id,
        )
