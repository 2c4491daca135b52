"""Pricing engine — stacks every applicable rule into one price breakdown.

``calculate_price`` is a pure function of the base price, quantity, inventory
level and a rule set. Rules are visited in descending priority, but there is no
first-match short-circuit: every applicable rule contributes its discount, and
the line price is clamped at zero once, after all discounts are summed.

``PricingEngine`` binds the pure function to a tenant's stored rules.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from commerce.pricing.rule import DiscountKind, PricingRule


@dataclass(frozen=True, slots=True)
class AppliedRule:
    rule_id: str
    name: str
    discount_kind: str
    discount_value: float
    amount: float


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    """Line totals for ``quantity`` units. Nothing here is per unit."""

    original_price: float
    final_price: float
    discount_amount: float
    applied_rules: tuple[AppliedRule, ...] = ()

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self.applied_rules]


def _percentage(rule, line_price, inventory):
    return line_price * rule.discount_value / 100


def _flat(rule, line_price, inventory):
    # A flat amount off the whole line, not per unit
    return rule.discount_value


def _inventory_based(rule, line_price, inventory):
    min_inventory = rule.conditions.min_inventory if rule.conditions else None
    if min_inventory and inventory >= min_inventory:
        return line_price * rule.discount_value / 100
    return 0.0


_EVALUATORS = {
    DiscountKind.PERCENTAGE: _percentage,
    DiscountKind.FLAT: _flat,
    DiscountKind.INVENTORY_BASED: _inventory_based,
}


def calculate_price(rules, product_id, quantity: int, base_price: float, inventory: int) -> PriceBreakdown:
    """Price ``quantity`` units of ``product_id`` against ``rules``.

    Inactive rules and rules written for other products are ignored, so the
    full tenant rule set may be passed in.
    """
    original_price = base_price * quantity

    candidates = [rule for rule in rules if rule.is_active and rule.targets(product_id)]
    candidates.sort(key=lambda rule: rule.priority or 0, reverse=True)

    total_discount = 0.0
    applied = []
    for rule in candidates:
        if not rule.applies_to(inventory, quantity):
            continue
        discount = _EVALUATORS[rule.kind](rule, original_price, inventory)
        if discount > 0:
            total_discount += discount
            applied.append(
                AppliedRule(
                    rule_id=str(rule.id),
                    name=rule.name,
                    discount_kind=rule.discount_kind,
                    discount_value=rule.discount_value,
                    amount=discount,
                )
            )

    final_price = max(0.0, original_price - total_discount)
    return PriceBreakdown(
        original_price=original_price,
        final_price=final_price,
        discount_amount=original_price - final_price,
        applied_rules=tuple(applied),
    )


class PricingEngine:
    """Prices lines against the tenant's active rules as currently stored."""

    def __init__(self, tenant_id):
        self.tenant_id = str(tenant_id)

    def rules_for(self, product_id) -> list[PricingRule]:
        return current_domain.repository_for(PricingRule).active_for_product(self.tenant_id, product_id)

    def calculate_price(self, product_id, quantity, base_price, inventory) -> PriceBreakdown:
        return calculate_price(self.rules_for(product_id), product_id, quantity, base_price, inventory)

    def price_product(self, product, quantity) -> PriceBreakdown:
        return self.calculate_price(product.product_id, quantity, product.price, product.inventory)
