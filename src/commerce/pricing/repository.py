"""Repository for the PricingRule aggregate."""

from protean.exceptions import ObjectNotFoundError

from commerce.domain import commerce
from commerce.pricing.rule import PricingRule

# Upper bound for unpaginated scans of a tenant's rules
SCAN_LIMIT = 10_000


@commerce.repository(part_of=PricingRule)
class PricingRuleRepository:
    def for_tenant(self, tenant_id) -> list[PricingRule]:
        return self._dao.query.filter(tenant_id=str(tenant_id)).limit(SCAN_LIMIT).all().items

    def active_for_product(self, tenant_id, product_id) -> list[PricingRule]:
        """Active rules of the tenant that are global or target ``product_id``."""
        rules = self._dao.query.filter(tenant_id=str(tenant_id), is_active=True).limit(SCAN_LIMIT).all().items
        return [rule for rule in rules if rule.targets(product_id)]

    def get_for_tenant(self, tenant_id, rule_id) -> PricingRule:
        rule = self.get(rule_id)
        if str(rule.tenant_id) != str(tenant_id):
            raise ObjectNotFoundError({"rule_id": [f"Pricing rule {rule_id} not found"]})
        return rule
