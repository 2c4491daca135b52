"""Pydantic request/response schemas for the Commerce API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and aggregates.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    name: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    phone: str


class LineItemSchema(BaseModel):
    product_id: str
    sku: str | None = None
    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    quantity: int
    base_price: float
    final_price: float
    discount_amount: float
    subtotal: float
    applied_rules: list[str] = []


class PaginationSchema(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


class RuleConditionsSchema(BaseModel):
    min_inventory: int | None = Field(default=None, ge=0)
    max_inventory: int | None = Field(default=None, ge=0)
    min_quantity: int | None = Field(default=None, ge=0)
    max_quantity: int | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartSummaryResponse(BaseModel):
    total_items: int
    subtotal: float
    total_discount: float
    total: float


class CartResponse(CartSummaryResponse):
    id: str
    tenant_id: str
    user_id: str
    status: str
    items: list[LineItemSchema]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    shipping_address: ShippingAddressSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "name": "Jane Doe",
                        "address_line1": "1 Main St",
                        "city": "Springfield",
                        "state": "IL",
                        "postal_code": "62701",
                        "country": "US",
                        "phone": "+1-555-0100",
                    }
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class OrderResponse(BaseModel):
    id: str
    tenant_id: str
    user_id: str
    order_number: str
    status: str
    items: list[LineItemSchema]
    total_items: int
    subtotal: float
    total_discount: float
    total: float
    shipping_address: ShippingAddressSchema
    created_at: str | None = None
    updated_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: PaginationSchema


# ---------------------------------------------------------------------------
# Pricing rules
# ---------------------------------------------------------------------------
class CreatePricingRuleRequest(BaseModel):
    name: str
    discount_kind: str
    discount_value: float
    product_id: str | None = None
    conditions: RuleConditionsSchema | None = None
    is_active: bool = True
    priority: int = 0

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Bulk 10%",
                    "discount_kind": "PERCENTAGE",
                    "discount_value": 10,
                    "conditions": {"min_quantity": 5},
                    "priority": 10,
                }
            ]
        }
    }


class UpdatePricingRuleRequest(BaseModel):
    name: str | None = None
    discount_kind: str | None = None
    discount_value: float | None = None
    conditions: RuleConditionsSchema | None = None
    is_active: bool | None = None
    priority: int | None = None


class PricingRuleResponse(BaseModel):
    id: str
    tenant_id: str
    product_id: str | None = None
    name: str
    discount_kind: str
    discount_value: float
    conditions: RuleConditionsSchema | None = None
    is_active: bool
    priority: int
    created_at: str | None = None
    updated_at: str | None = None


class PricingRuleListResponse(BaseModel):
    rules: list[PricingRuleResponse]
    pagination: PaginationSchema


class RuleIdResponse(BaseModel):
    rule_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
