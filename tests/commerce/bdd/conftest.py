"""Shared BDD fixtures and step definitions for the Commerce domain."""

import pytest
from commerce.cart import access
from commerce.cart.cart import Cart
from commerce.catalogue.product import Product
from commerce.pricing.rule import PricingRule
from protean import current_domain
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def context():
    """Mutable scenario state shared between steps."""
    return {"tenant_id": None, "user_id": None, "outcomes": []}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('tenant "{tenant_id}" sells product "{product_id}" at {price:f} with {stock:d} in stock'))
def product_in_catalogue(tenant_id, product_id, price, stock):
    product = Product.register(
        tenant_id=tenant_id,
        product_id=product_id,
        sku=f"SKU-{product_id}",
        name=f"Product {product_id}",
        price=price,
        inventory=stock,
    )
    current_domain.repository_for(Product).add(product)


@given(parsers.cfparse('tenant "{tenant_id}" has a {value:d} {kind} rule "{name}" requiring at least {minimum:d} units'))
def gated_rule(tenant_id, value, kind, name, minimum):
    rule = PricingRule.create(
        tenant_id=tenant_id,
        name=name,
        discount_kind=kind,
        discount_value=value,
        conditions={"min_quantity": minimum},
    )
    current_domain.repository_for(PricingRule).add(rule)


@given(parsers.cfparse('tenant "{tenant_id}" has a {value:d} {kind} rule "{name}"'))
def plain_rule(tenant_id, value, kind, name):
    rule = PricingRule.create(tenant_id=tenant_id, name=name, discount_kind=kind, discount_value=value)
    current_domain.repository_for(PricingRule).add(rule)


@given(parsers.cfparse('user "{user_id}" of tenant "{tenant_id}" has {quantity:d} of "{product_id}" in the cart'))
def cart_with_item(context, tenant_id, user_id, quantity, product_id):
    access.add_to_cart(tenant_id, user_id, product_id, quantity)
    context.update(tenant_id=tenant_id, user_id=user_id)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('user "{user_id}" of tenant "{tenant_id}" adds {quantity:d} of "{product_id}" to the cart'))
def add_to_cart(context, tenant_id, user_id, quantity, product_id):
    access.add_to_cart(tenant_id, user_id, product_id, quantity)
    context.update(tenant_id=tenant_id, user_id=user_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _cart(context):
    return current_domain.repository_for(Cart).get_for_user(context["tenant_id"], context["user_id"])


@then(parsers.cfparse("the cart total is {total:f}"))
def cart_total(context, total):
    assert _cart(context).total == pytest.approx(total)


@then(parsers.cfparse("the cart discount is {discount:f}"))
def cart_discount(context, discount):
    assert _cart(context).total_discount == pytest.approx(discount)


@then(parsers.cfparse("the cart has {lines:d} line with {units:d} units"))
def cart_lines(context, lines, units):
    cart = _cart(context)
    assert len(cart.items) == lines
    assert cart.total_items == units


@then(parsers.cfparse('product "{product_id}" of tenant "{tenant_id}" has {stock:d} in stock'))
def product_stock(tenant_id, product_id, stock):
    assert current_domain.repository_for(Product).get_for_tenant(tenant_id, product_id).inventory == stock
