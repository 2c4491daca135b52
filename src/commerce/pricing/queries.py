"""Read-side queries over a tenant's pricing rules."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from commerce.pricing.rule import DiscountKind, PricingRule
from commerce.utils.pagination import Page, paginate

DEFAULT_RULE_PAGE_SIZE = 20


def get_rule(tenant_id, rule_id) -> PricingRule:
    return current_domain.repository_for(PricingRule).get_for_tenant(tenant_id, rule_id)


def list_rules(
    tenant_id,
    product_id=None,
    is_active=None,
    discount_kind=None,
    page=1,
    limit=DEFAULT_RULE_PAGE_SIZE,
) -> Page:
    """List rules by priority (highest first), newest first within a priority.

    Filtering by ``product_id`` keeps global rules too, since they apply to
    that product as well.
    """
    rules = current_domain.repository_for(PricingRule).for_tenant(tenant_id)

    if product_id is not None:
        rules = [rule for rule in rules if rule.targets(product_id)]
    if is_active is not None:
        rules = [rule for rule in rules if bool(rule.is_active) == is_active]
    if discount_kind is not None:
        try:
            kind = DiscountKind(discount_kind).value
        except ValueError:
            raise ValidationError({"discount_kind": [f"Unknown discount kind: {discount_kind}"]}) from None
        rules = [rule for rule in rules if rule.discount_kind == kind]

    rules.sort(key=lambda rule: rule.created_at.timestamp() if rule.created_at else 0.0, reverse=True)
    rules.sort(key=lambda rule: rule.priority or 0, reverse=True)
    return paginate(rules, page=page, limit=limit)
