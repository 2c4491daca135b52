"""InventoryGuard — the only writer of product stock counts.

``reserve`` is a conditional decrement: it applies only if the stock on hand
still covers the requested quantity when the write happens, and reports whether
it matched. Callers run it inside the placement unit of work while holding the
product's stock permit, so a miss aborts the whole transaction instead of
overselling.
"""

import structlog
from protean.utils.globals import current_domain

from commerce.catalogue.product import Product

logger = structlog.get_logger(__name__)


class InventoryGuard:
    def __init__(self, tenant_id):
        self.tenant_id = str(tenant_id)

    @property
    def _products(self):
        return current_domain.repository_for(Product)

    def reserve(self, product_id, quantity) -> bool:
        repo = self._products
        product = repo.find_for_tenant(self.tenant_id, product_id)
        if product is None or not product.withdraw(quantity):
            logger.warning(
                "Conditional stock decrement matched nothing",
                tenant_id=self.tenant_id,
                product_id=str(product_id),
                requested=quantity,
                available=product.inventory if product else None,
            )
            return False

        repo.add(product)
        return True

    def restore(self, product_id, quantity) -> bool:
        repo = self._products
        product = repo.find_for_tenant(self.tenant_id, product_id)
        if product is None:
            logger.warning(
                "Cannot restore stock for unknown product",
                tenant_id=self.tenant_id,
                product_id=str(product_id),
                quantity=quantity,
            )
            return False

        product.restock(quantity)
        repo.add(product)
        return True
