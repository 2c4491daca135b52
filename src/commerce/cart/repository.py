"""Repository for the Cart aggregate, keyed by (tenant, user)."""

from protean.exceptions import ObjectNotFoundError

from commerce.cart.cart import Cart
from commerce.domain import commerce


@commerce.repository(part_of=Cart)
class CartRepository:
    def find_for_user(self, tenant_id, user_id) -> Cart | None:
        carts = self._dao.query.filter(tenant_id=str(tenant_id), user_id=str(user_id)).all().items
        return carts[0] if carts else None

    def get_for_user(self, tenant_id, user_id) -> Cart:
        cart = self.find_for_user(tenant_id, user_id)
        if cart is None:
            raise ObjectNotFoundError({"cart": ["Cart not found"]})
        return cart
