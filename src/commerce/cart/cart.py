"""Cart aggregate — one consolidated cart per (tenant, user).

Each line keeps a snapshot of the product and of its last pricing. Prices are
stored per unit (``base_price``, ``final_price``, ``discount_amount``) while
``subtotal`` is the discounted line total. Cart totals are recomputed from the
lines after every mutation and never maintained incrementally.

A CHECKED_OUT cart is frozen until ``reclaim`` empties and reopens it.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from commerce.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartItemAdded,
    CartItemQuantityUpdated,
    CartItemRemoved,
    CartReclaimed,
    CartRepriced,
)
from commerce.domain import commerce
from commerce.exceptions import InsufficientInventoryError, ProductUnavailableError


class CartStatus(Enum):
    ACTIVE = "ACTIVE"
    CHECKED_OUT = "CHECKED_OUT"


@commerce.entity(part_of="Cart")
class CartItem:
    product_id = String(required=True, max_length=255)
    sku = String(max_length=100)
    name = String(max_length=255)
    description = Text()
    image_url = String(max_length=1024)
    category = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    base_price = Float(default=0.0)
    final_price = Float(default=0.0)
    discount_amount = Float(default=0.0)
    subtotal = Float(default=0.0)
    applied_rules = Text()  # JSON array of rule names

    @property
    def rule_names(self) -> list[str]:
        return json.loads(self.applied_rules) if self.applied_rules else []

    def apply_pricing(self, base_price, breakdown):
        """Store a line breakdown for the current quantity as per-unit prices."""
        self.base_price = base_price
        self.final_price = breakdown.final_price / self.quantity
        self.discount_amount = breakdown.discount_amount / self.quantity
        self.subtotal = breakdown.final_price
        self.applied_rules = json.dumps(breakdown.rule_names)

    def refresh_snapshot(self, product):
        self.description = product.description
        self.image_url = product.image_url
        self.category = product.category

    def snapshot(self) -> dict:
        return {
            "product_id": self.product_id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "category": self.category,
            "quantity": self.quantity,
            "base_price": self.base_price,
            "final_price": self.final_price,
            "discount_amount": self.discount_amount,
            "subtotal": self.subtotal,
            "applied_rules": self.rule_names,
        }


@commerce.aggregate
class Cart:
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_items = Integer(default=0)
    subtotal = Float(default=0.0)
    total_discount = Float(default=0.0)
    total = Float(default=0.0)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()
    checked_out_at = DateTime()

    @invariant.post
    def checked_out_cart_must_have_items(self):
        if self.status == CartStatus.CHECKED_OUT.value and not self.items:
            raise ValidationError({"cart": ["A checked-out cart must hold the purchased items"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, tenant_id, user_id):
        now = datetime.now(UTC)
        return cls(
            tenant_id=tenant_id,
            user_id=user_id,
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self):
        return self.status == CartStatus.ACTIVE.value

    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _ensure_active(self):
        if not self.is_active:
            raise ValidationError({"status": ["Cart has been checked out and cannot be modified"]})

    @staticmethod
    def _ensure_purchasable(product, quantity):
        if not product.is_active:
            raise ProductUnavailableError({"product_id": [f"Product {product.name} is not available"]})
        if quantity > product.inventory:
            raise InsufficientInventoryError(product.name, product.inventory)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity, pricer):
        """Add ``quantity`` units, merging into an existing line for the product.

        The merged line is checked against stock and priced for its new total
        quantity, so quantity-gated rules see the whole line.
        """
        self._ensure_active()
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.item_for(product.product_id)
        line_quantity = quantity + (existing.quantity if existing else 0)
        self._ensure_purchasable(product, line_quantity)

        breakdown = pricer(product, line_quantity)
        if existing:
            existing.quantity = line_quantity
            existing.apply_pricing(product.price, breakdown)
        else:
            item = CartItem(
                product_id=str(product.product_id),
                sku=product.sku,
                name=product.name,
                description=product.description,
                image_url=product.image_url,
                category=product.category,
                quantity=line_quantity,
            )
            item.apply_pricing(product.price, breakdown)
            self.add_items(item)

        self.recalculate_totals()

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                tenant_id=str(self.tenant_id),
                user_id=str(self.user_id),
                product_id=str(product.product_id),
                quantity=quantity,
                line_quantity=line_quantity,
                line_total=breakdown.final_price,
            )
        )

    def update_item_quantity(self, product, quantity, pricer):
        """Replace a line's quantity and reprice it for the full new quantity."""
        self._ensure_active()
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self.item_for(product.product_id)
        if item is None:
            raise ObjectNotFoundError({"product_id": ["Item not found in cart"]})
        if quantity > product.inventory:
            raise InsufficientInventoryError(product.name, product.inventory)

        previous_quantity = item.quantity
        breakdown = pricer(product, quantity)
        item.quantity = quantity
        item.apply_pricing(product.price, breakdown)
        self.recalculate_totals()

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product.product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
                line_total=breakdown.final_price,
            )
        )

    def remove_item(self, product_id):
        self._ensure_active()

        item = self.item_for(product_id)
        if item is None:
            raise ObjectNotFoundError({"product_id": ["Item not found in cart"]})

        self.remove_items(item)
        self.recalculate_totals()

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        self._ensure_active()

        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.recalculate_totals()

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=removed))

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def reprice_item(self, product, breakdown):
        """Refresh a line whose stored prices drifted from the catalogue."""
        item = self.item_for(product.product_id)
        if item is None:
            raise ObjectNotFoundError({"product_id": ["Item not found in cart"]})
        item.apply_pricing(product.price, breakdown)
        item.refresh_snapshot(product)

    def record_repricing(self, product_ids):
        self.recalculate_totals()
        self.raise_(
            CartRepriced(
                cart_id=str(self.id),
                product_ids=json.dumps([str(pid) for pid in product_ids]),
                total=self.total,
            )
        )

    def recalculate_totals(self):
        items = list(self.items)
        self.total_items = sum(item.quantity for item in items)
        self.subtotal = sum(item.quantity * item.base_price for item in items)
        self.total_discount = sum(item.discount_amount * item.quantity for item in items)
        self.total = sum(item.subtotal for item in items)
        self.updated_at = datetime.now(UTC)

    def summary(self) -> dict:
        return {
            "total_items": self.total_items,
            "subtotal": self.subtotal,
            "total_discount": self.total_discount,
            "total": self.total,
        }

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def mark_checked_out(self):
        self._ensure_active()
        if not self.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        now = datetime.now(UTC)
        self.status = CartStatus.CHECKED_OUT.value
        self.checked_out_at = now
        self.updated_at = now

        self.raise_(
            CartCheckedOut(
                cart_id=str(self.id),
                tenant_id=str(self.tenant_id),
                user_id=str(self.user_id),
                checked_out_at=now,
            )
        )

    def reclaim(self):
        """Empty a checked-out cart and reopen it. Returns whether anything changed."""
        if self.is_active:
            return False

        self.status = CartStatus.ACTIVE.value
        self.checked_out_at = None
        for item in list(self.items):
            self.remove_items(item)
        self.recalculate_totals()

        self.raise_(
            CartReclaimed(
                cart_id=str(self.id),
                tenant_id=str(self.tenant_id),
                user_id=str(self.user_id),
            )
        )
        return True
