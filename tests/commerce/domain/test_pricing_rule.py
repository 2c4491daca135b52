"""Tests for the PricingRule aggregate and its conditions."""

import pytest
from commerce.pricing.rule import DiscountKind, PricingRule
from protean.exceptions import ValidationError


def _rule(**overrides):
    defaults = {
        "tenant_id": "tenant-a",
        "name": "Spring sale",
        "discount_kind": "PERCENTAGE",
        "discount_value": 10.0,
    }
    defaults.update(overrides)
    return PricingRule.create(**defaults)


class TestCreate:
    def test_defaults(self):
        rule = _rule()
        assert rule.kind == DiscountKind.PERCENTAGE
        assert rule.is_active is True
        assert rule.priority == 0
        assert rule.conditions is None
        assert rule.created_at is not None

    def test_unknown_discount_kind_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _rule(discount_kind="BOGO")
        assert "discount_kind" in exc.value.messages

    def test_negative_discount_value_is_rejected(self):
        with pytest.raises(ValidationError):
            _rule(discount_value=-1)

    def test_min_above_max_is_rejected(self):
        with pytest.raises(ValidationError):
            _rule(conditions={"min_quantity": 10, "max_quantity": 2})


class TestTargeting:
    def test_global_rule_targets_every_product(self):
        rule = _rule()
        assert rule.targets("prod-001")
        assert rule.targets("prod-002")

    def test_product_rule_targets_only_its_product(self):
        rule = _rule(product_id="prod-001")
        assert rule.targets("prod-001")
        assert not rule.targets("prod-002")


class TestRevise:
    def test_partial_update(self):
        rule = _rule()
        rule.revise(discount_value=25.0, priority=3)
        assert rule.discount_value == 25.0
        assert rule.priority == 3
        assert rule.name == "Spring sale"

    def test_conditions_can_be_replaced_and_cleared(self):
        rule = _rule(conditions={"min_quantity": 2})
        rule.revise(conditions={"max_inventory": 5})
        assert rule.conditions.max_inventory == 5
        assert rule.conditions.min_quantity is None

        rule.revise(conditions=None)
        assert rule.conditions is None

    def test_unknown_fields_are_rejected(self):
        rule = _rule()
        with pytest.raises(ValidationError):
            rule.revise(tenant_id="tenant-b")
