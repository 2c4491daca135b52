"""Product read model — the slice of the catalogue that checkout depends on.

The catalogue service owns products; this context only reads price, stock and
display metadata. ``product_id`` is the catalogue's identifier and is unique
only within a tenant, so every lookup goes through ``(tenant_id, product_id)``.
Stock counts are changed exclusively through ``InventoryGuard``.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from commerce.domain import commerce

SCAN_LIMIT = 10_000


@commerce.aggregate
class Product:
    tenant_id = Identifier(required=True)
    product_id = String(required=True, max_length=255)
    sku = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    description = Text()
    image_url = String(max_length=1024)
    category = String(max_length=100)
    price = Float(required=True, min_value=0.0)
    inventory = Integer(required=True, min_value=0)
    is_active = Boolean(default=True)
    updated_at = DateTime()

    @classmethod
    def register(cls, tenant_id, product_id, sku, name, price, inventory, **details):
        return cls(
            tenant_id=tenant_id,
            product_id=product_id,
            sku=sku,
            name=name,
            price=price,
            inventory=inventory,
            description=details.get("description"),
            image_url=details.get("image_url"),
            category=details.get("category"),
            is_active=details.get("is_active", True),
            updated_at=datetime.now(UTC),
        )

    def change_price(self, price):
        if price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})
        self.price = price
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def has_stock(self, quantity):
        return self.inventory >= quantity

    def withdraw(self, quantity):
        """Decrement stock only if enough is on hand. Returns whether it matched."""
        if quantity <= 0 or not self.has_stock(quantity):
            return False
        self.inventory -= quantity
        self.updated_at = datetime.now(UTC)
        return True

    def restock(self, quantity):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        self.inventory += quantity
        self.updated_at = datetime.now(UTC)


@commerce.repository(part_of=Product)
class ProductRepository:
    def find_for_tenant(self, tenant_id, product_id) -> Product | None:
        matches = (
            self._dao.query.filter(tenant_id=str(tenant_id), product_id=str(product_id))
            .limit(SCAN_LIMIT)
            .all()
            .items
        )
        return matches[0] if matches else None

    def get_for_tenant(self, tenant_id, product_id) -> Product:
        product = self.find_for_tenant(tenant_id, product_id)
        if product is None:
            raise ObjectNotFoundError({"product_id": [f"Product {product_id} not found"]})
        return product
