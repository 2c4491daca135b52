"""PricingRule aggregate — a tenant's dynamic discount definition.

A rule targets one product or, when ``product_id`` is unset, every product of
the tenant. Its optional conditions gate it on the current inventory level and
the requested quantity. All bounds are inclusive.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, ValueObject

from commerce.domain import commerce


class DiscountKind(Enum):
    PERCENTAGE = "PERCENTAGE"
    FLAT = "FLAT"
    INVENTORY_BASED = "INVENTORY_BASED"


def _coerce_kind(value):
    try:
        return DiscountKind(value).value
    except ValueError:
        raise ValidationError({"discount_kind": [f"Unknown discount kind: {value}"]}) from None


@commerce.value_object(part_of="PricingRule")
class RuleConditions:
    """Optional inclusive bounds on inventory level and requested quantity."""

    min_inventory = Integer(min_value=0)
    max_inventory = Integer(min_value=0)
    min_quantity = Integer(min_value=0)
    max_quantity = Integer(min_value=0)

    @invariant.post
    def bounds_must_be_ordered(self):
        pairs = (
            ("inventory", self.min_inventory, self.max_inventory),
            ("quantity", self.min_quantity, self.max_quantity),
        )
        for name, low, high in pairs:
            if low is not None and high is not None and low > high:
                raise ValidationError({f"min_{name}": [f"min_{name} ({low}) cannot exceed max_{name} ({high})"]})

    def is_satisfied_by(self, inventory, quantity):
        if self.min_inventory is not None and inventory < self.min_inventory:
            return False
        if self.max_inventory is not None and inventory > self.max_inventory:
            return False
        if self.min_quantity is not None and quantity < self.min_quantity:
            return False
        if self.max_quantity is not None and quantity > self.max_quantity:
            return False
        return True


@commerce.aggregate
class PricingRule:
    tenant_id = Identifier(required=True)
    product_id = String(max_length=255)  # Unset: applies to every product of the tenant
    name = String(required=True, max_length=255)
    discount_kind = String(required=True, choices=DiscountKind)
    discount_value = Float(required=True, min_value=0.0)
    conditions = ValueObject(RuleConditions)
    is_active = Boolean(default=True)
    priority = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        tenant_id,
        name,
        discount_kind,
        discount_value,
        product_id=None,
        conditions=None,
        is_active=True,
        priority=0,
    ):
        now = datetime.now(UTC)
        return cls(
            tenant_id=tenant_id,
            product_id=product_id,
            name=name,
            discount_kind=_coerce_kind(discount_kind),
            discount_value=discount_value,
            conditions=RuleConditions(**conditions) if conditions else None,
            is_active=is_active,
            priority=priority,
            created_at=now,
            updated_at=now,
        )

    @property
    def kind(self):
        return DiscountKind(self.discount_kind)

    def targets(self, product_id):
        """True when the rule is global or written for ``product_id``."""
        return not self.product_id or str(self.product_id) == str(product_id)

    def applies_to(self, inventory, quantity):
        if self.conditions is None:
            return True
        return self.conditions.is_satisfied_by(inventory, quantity)

    def revise(self, **changes):
        """Apply a partial update. Unknown keys are rejected."""
        allowed = {"name", "discount_kind", "discount_value", "conditions", "is_active", "priority"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        if "discount_kind" in changes:
            changes["discount_kind"] = _coerce_kind(changes["discount_kind"])
        if "conditions" in changes:
            conditions = changes["conditions"]
            changes["conditions"] = RuleConditions(**conditions) if conditions else None

        for field, value in changes.items():
            setattr(self, field, value)
        self.updated_at = datetime.now(UTC)
