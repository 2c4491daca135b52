"""Cart operations as seen by callers.

Each mutation holds the (tenant, user) cart permit for its whole duration so
concurrent requests for the same cart are applied one after another. Mutations
reclaim the cart first, so a buyer who already checked out starts over with an
empty ACTIVE cart instead of hitting a frozen one.
"""

from protean.utils.globals import current_domain

from commerce.cart.cart import Cart
from commerce.cart.items import AddToCart, RemoveFromCart, UpdateCartItemQuantity
from commerce.cart.management import ClearCart, ReclaimCart
from commerce.utils.permits import cart_permits


def _carts():
    return current_domain.repository_for(Cart)


def _reclaim(tenant_id, user_id):
    current_domain.process(ReclaimCart(tenant_id=tenant_id, user_id=user_id), asynchronous=False)


def open_cart(tenant_id, user_id) -> Cart:
    """Return the user's ACTIVE cart, creating or reopening it as needed."""
    with cart_permits.hold(tenant_id, user_id):
        _reclaim(tenant_id, user_id)
        return _carts().get_for_user(tenant_id, user_id)


def get_cart(tenant_id, user_id) -> Cart:
    """Read the stored cart as is. Never creates or reopens it."""
    return _carts().get_for_user(tenant_id, user_id)


def cart_summary(tenant_id, user_id) -> dict:
    return open_cart(tenant_id, user_id).summary()


def add_to_cart(tenant_id, user_id, product_id, quantity) -> Cart:
    with cart_permits.hold(tenant_id, user_id):
        _reclaim(tenant_id, user_id)
        current_domain.process(
            AddToCart(tenant_id=tenant_id, user_id=user_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )
        return _carts().get_for_user(tenant_id, user_id)


def update_cart_item(tenant_id, user_id, product_id, quantity) -> Cart:
    with cart_permits.hold(tenant_id, user_id):
        _reclaim(tenant_id, user_id)
        current_domain.process(
            UpdateCartItemQuantity(tenant_id=tenant_id, user_id=user_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )
        return _carts().get_for_user(tenant_id, user_id)


def remove_from_cart(tenant_id, user_id, product_id) -> Cart:
    with cart_permits.hold(tenant_id, user_id):
        _reclaim(tenant_id, user_id)
        current_domain.process(
            RemoveFromCart(tenant_id=tenant_id, user_id=user_id, product_id=product_id),
            asynchronous=False,
        )
        return _carts().get_for_user(tenant_id, user_id)


def clear_cart(tenant_id, user_id) -> None:
    with cart_permits.hold(tenant_id, user_id):
        current_domain.process(ClearCart(tenant_id=tenant_id, user_id=user_id), asynchronous=False)
