"""Shared fixtures for commerce tests: seeded products and pricing rules."""

import pytest
from protean import current_domain

from commerce.catalogue.product import Product
from commerce.pricing.rule import PricingRule

SHIPPING_ADDRESS = {
    "name": "Jane Doe",
    "address_line1": "1 Main St",
    "address_line2": "Apt 4",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "US",
    "phone": "+1-555-0100",
}


@pytest.fixture()
def tenant_id():
    return "tenant-a"


@pytest.fixture()
def user_id():
    return "user-001"


@pytest.fixture()
def shipping_address():
    return dict(SHIPPING_ADDRESS)


@pytest.fixture()
def make_product():
    """Persist a product in the catalogue read model and return it."""

    def _make(tenant_id="tenant-a", product_id="prod-001", price=100.0, inventory=10, **overrides):
        product = Product.register(
            tenant_id=tenant_id,
            product_id=product_id,
            sku=overrides.pop("sku", f"SKU-{product_id}"),
            name=overrides.pop("name", f"Product {product_id}"),
            price=price,
            inventory=inventory,
            description=overrides.pop("description", "A product"),
            image_url=overrides.pop("image_url", "https://img.example.com/p.png"),
            category=overrides.pop("category", "general"),
            is_active=overrides.pop("is_active", True),
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_rule():
    """Persist a pricing rule and return it."""

    def _make(tenant_id="tenant-a", name="Rule", discount_kind="PERCENTAGE", discount_value=10.0, **kwargs):
        rule = PricingRule.create(
            tenant_id=tenant_id,
            name=name,
            discount_kind=discount_kind,
            discount_value=discount_value,
            **kwargs,
        )
        current_domain.repository_for(PricingRule).add(rule)
        return rule

    return _make
