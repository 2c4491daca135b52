"""Tests for the pure pricing calculation."""

import pytest
from commerce.pricing.engine import calculate_price
from commerce.pricing.rule import PricingRule


def _rule(name="Rule", discount_kind="PERCENTAGE", discount_value=10.0, **kwargs):
    return PricingRule.create(
        tenant_id="tenant-a",
        name=name,
        discount_kind=discount_kind,
        discount_value=discount_value,
        **kwargs,
    )


class TestNoRules:
    def test_price_is_base_times_quantity(self):
        result = calculate_price([], "prod-001", 3, 20.0, 100)
        assert result.original_price == 60.0
        assert result.final_price == 60.0
        assert result.discount_amount == 0.0
        assert result.applied_rules == ()


class TestDiscountKinds:
    def test_percentage_scales_with_line_price(self):
        result = calculate_price([_rule(discount_value=10)], "prod-001", 2, 100.0, 50)
        assert result.discount_amount == pytest.approx(20.0)
        assert result.final_price == pytest.approx(180.0)

    def test_flat_is_taken_once_per_line(self):
        result = calculate_price([_rule(discount_kind="FLAT", discount_value=5)], "prod-001", 4, 10.0, 50)
        assert result.discount_amount == pytest.approx(5.0)
        assert result.final_price == pytest.approx(35.0)

    def test_inventory_based_applies_at_or_above_min_inventory(self):
        rule = _rule(discount_kind="INVENTORY_BASED", discount_value=20, conditions={"min_inventory": 50})
        assert calculate_price([rule], "prod-001", 1, 100.0, 50).final_price == pytest.approx(80.0)
        assert calculate_price([rule], "prod-001", 1, 100.0, 49).final_price == pytest.approx(100.0)

    def test_inventory_based_without_min_inventory_gives_nothing(self):
        rule = _rule(discount_kind="INVENTORY_BASED", discount_value=20)
        result = calculate_price([rule], "prod-001", 1, 100.0, 1000)
        assert result.discount_amount == 0.0
        assert result.applied_rules == ()


class TestStacking:
    def test_percentage_and_flat_stack(self):
        rules = [
            _rule(name="Ten percent", discount_value=10, priority=10),
            _rule(name="Five off", discount_kind="FLAT", discount_value=5, priority=5),
        ]
        result = calculate_price(rules, "prod-001", 2, 100.0, 50)
        assert result.original_price == pytest.approx(200.0)
        assert result.discount_amount == pytest.approx(25.0)
        assert result.final_price == pytest.approx(175.0)
        assert result.rule_names == ["Ten percent", "Five off"]

    def test_rules_are_visited_by_descending_priority(self):
        rules = [
            _rule(name="low", priority=1),
            _rule(name="high", priority=99),
            _rule(name="mid", priority=50),
        ]
        result = calculate_price(rules, "prod-001", 1, 100.0, 10)
        assert result.rule_names == ["high", "mid", "low"]

    def test_final_price_is_clamped_at_zero(self):
        rules = [_rule(discount_kind="FLAT", discount_value=500)]
        result = calculate_price(rules, "prod-001", 1, 100.0, 10)
        assert result.final_price == 0.0
        assert result.discount_amount == pytest.approx(100.0)
        assert result.applied_rules[0].amount == pytest.approx(500.0)


class TestRuleSelection:
    def test_inactive_rules_are_ignored(self):
        result = calculate_price([_rule(is_active=False)], "prod-001", 1, 100.0, 10)
        assert result.final_price == 100.0

    def test_rules_for_other_products_are_ignored(self):
        result = calculate_price([_rule(product_id="prod-999")], "prod-001", 1, 100.0, 10)
        assert result.final_price == 100.0

    def test_product_specific_and_global_rules_both_apply(self):
        rules = [_rule(name="global", discount_value=10), _rule(name="specific", product_id="prod-001", discount_value=5)]
        result = calculate_price(rules, "prod-001", 1, 100.0, 10)
        assert result.discount_amount == pytest.approx(15.0)

    def test_min_quantity_gates_the_rule(self):
        rules = [_rule(discount_value=10, conditions={"min_quantity": 5})]
        assert calculate_price(rules, "prod-001", 3, 100.0, 100).discount_amount == 0.0
        assert calculate_price(rules, "prod-001", 10, 100.0, 100).discount_amount == pytest.approx(100.0)

    def test_bounds_are_inclusive(self):
        rules = [_rule(conditions={"min_quantity": 2, "max_quantity": 5, "max_inventory": 20})]
        assert calculate_price(rules, "prod-001", 2, 10.0, 20).applied_rules
        assert calculate_price(rules, "prod-001", 5, 10.0, 20).applied_rules
        assert not calculate_price(rules, "prod-001", 6, 10.0, 20).applied_rules
        assert not calculate_price(rules, "prod-001", 5, 10.0, 21).applied_rules


class TestPurity:
    def test_identical_inputs_give_identical_output(self):
        rules = [_rule(discount_value=15), _rule(discount_kind="FLAT", discount_value=3)]
        first = calculate_price(rules, "prod-001", 4, 12.5, 30)
        second = calculate_price(rules, "prod-001", 4, 12.5, 30)
        assert first == second

    @pytest.mark.parametrize("value", [0, 50, 100, 250])
    def test_final_price_is_never_negative(self, value):
        rules = [_rule(discount_value=value), _rule(discount_kind="FLAT", discount_value=value)]
        assert calculate_price(rules, "prod-001", 1, 40.0, 10).final_price >= 0
