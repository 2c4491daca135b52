"""Pricing rule management — commands and handler.

Rules are written by the tenant's merchandising tools and only read by the
pricing engine. Every command is scoped by ``tenant_id``; a rule belonging to
another tenant is reported as not found.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from commerce.domain import commerce
from commerce.pricing.rule import PricingRule

logger = structlog.get_logger(__name__)


def _load_json(value):
    return json.loads(value) if isinstance(value, str) else value


@commerce.command(part_of="PricingRule")
class CreatePricingRule:
    tenant_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    discount_kind = String(required=True, max_length=30)
    discount_value = Float(required=True, min_value=0.0)
    product_id = String(max_length=255)
    conditions = Text()  # JSON: {min_inventory, max_inventory, min_quantity, max_quantity}
    is_active = Boolean(default=True)
    priority = Integer(default=0)


@commerce.command(part_of="PricingRule")
class UpdatePricingRule:
    tenant_id = Identifier(required=True)
    rule_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: subset of name, discount_kind, discount_value, conditions, ...


@commerce.command(part_of="PricingRule")
class DeletePricingRule:
    tenant_id = Identifier(required=True)
    rule_id = Identifier(required=True)


@commerce.command_handler(part_of=PricingRule)
class ManagePricingRulesHandler:
    @handle(CreatePricingRule)
    def create_rule(self, command):
        rule = PricingRule.create(
            tenant_id=command.tenant_id,
            name=command.name,
            discount_kind=command.discount_kind,
            discount_value=command.discount_value,
            product_id=command.product_id,
            conditions=_load_json(command.conditions) if command.conditions else None,
            is_active=command.is_active if command.is_active is not None else True,
            priority=command.priority or 0,
        )
        current_domain.repository_for(PricingRule).add(rule)
        logger.info(
            "Pricing rule created",
            tenant_id=str(command.tenant_id),
            rule_id=str(rule.id),
            discount_kind=rule.discount_kind,
        )
        return str(rule.id)

    @handle(UpdatePricingRule)
    def update_rule(self, command):
        repo = current_domain.repository_for(PricingRule)
        rule = repo.get_for_tenant(command.tenant_id, command.rule_id)
        rule.revise(**_load_json(command.changes))
        repo.add(rule)
        logger.info("Pricing rule updated", tenant_id=str(command.tenant_id), rule_id=str(rule.id))

    @handle(DeletePricingRule)
    def delete_rule(self, command):
        repo = current_domain.repository_for(PricingRule)
        rule = repo.get_for_tenant(command.tenant_id, command.rule_id)
        repo._dao.delete(rule)
        logger.info("Pricing rule deleted", tenant_id=str(command.tenant_id), rule_id=str(command.rule_id))
