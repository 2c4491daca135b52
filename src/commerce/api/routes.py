"""FastAPI routes for the Commerce domain — cart, orders and pricing rules.

Tenant and user identity arrive in the ``X-Tenant-ID`` and ``X-User-ID``
headers, already authenticated upstream.
"""

import json

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from commerce.api.schemas import (
    AddToCartRequest,
    CartResponse,
    CartSummaryResponse,
    CheckoutRequest,
    CreatePricingRuleRequest,
    LineItemSchema,
    OrderListResponse,
    OrderResponse,
    PaginationSchema,
    PricingRuleListResponse,
    PricingRuleResponse,
    ShippingAddressSchema,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdatePricingRuleRequest,
)
from commerce.cart import access
from commerce.checkout.coordinator import CheckoutCoordinator
from commerce.order import queries as order_queries
from commerce.order.status import update_order_status
from commerce.pricing import queries as rule_queries
from commerce.pricing.management import CreatePricingRule, DeletePricingRule, UpdatePricingRule


def _iso(value):
    return value.isoformat() if value else None


def _cart_response(cart) -> CartResponse:
    return CartResponse(
        id=str(cart.id),
        tenant_id=str(cart.tenant_id),
        user_id=str(cart.user_id),
        status=cart.status,
        items=[LineItemSchema(**item.snapshot()) for item in cart.items],
        **cart.summary(),
    )


def _order_response(order) -> OrderResponse:
    items = [
        LineItemSchema(
            product_id=item.product_id,
            sku=item.sku,
            name=item.name,
            description=item.description,
            image_url=item.image_url,
            category=item.category,
            quantity=item.quantity,
            base_price=item.base_price,
            final_price=item.final_price,
            discount_amount=item.discount_amount,
            subtotal=item.subtotal,
            applied_rules=item.rule_names,
        )
        for item in order.items
    ]
    return OrderResponse(
        id=str(order.id),
        tenant_id=str(order.tenant_id),
        user_id=str(order.user_id),
        order_number=order.order_number,
        status=order.status,
        items=items,
        total_items=order.total_items,
        subtotal=order.subtotal,
        total_discount=order.total_discount,
        total=order.total,
        shipping_address=ShippingAddressSchema(**order.shipping_address.to_dict()),
        created_at=_iso(order.created_at),
        updated_at=_iso(order.updated_at),
    )


def _rule_response(rule) -> PricingRuleResponse:
    return PricingRuleResponse(
        id=str(rule.id),
        tenant_id=str(rule.tenant_id),
        product_id=rule.product_id,
        name=rule.name,
        discount_kind=rule.discount_kind,
        discount_value=rule.discount_value,
        conditions=rule.conditions.to_dict() if rule.conditions else None,
        is_active=bool(rule.is_active),
        priority=rule.priority or 0,
        created_at=_iso(rule.created_at),
        updated_at=_iso(rule.updated_at),
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(x_tenant_id: str = Header(), x_user_id: str = Header()) -> CartResponse:
    return _cart_response(access.open_cart(x_tenant_id, x_user_id))


@cart_router.get("/summary", response_model=CartSummaryResponse)
async def get_cart_summary(x_tenant_id: str = Header(), x_user_id: str = Header()) -> CartSummaryResponse:
    return CartSummaryResponse(**access.cart_summary(x_tenant_id, x_user_id))


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(
    body: AddToCartRequest, x_tenant_id: str = Header(), x_user_id: str = Header()
) -> CartResponse:
    cart = access.add_to_cart(x_tenant_id, x_user_id, body.product_id, body.quantity)
    return _cart_response(cart)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str, body: UpdateCartItemRequest, x_tenant_id: str = Header(), x_user_id: str = Header()
) -> CartResponse:
    cart = access.update_cart_item(x_tenant_id, x_user_id, product_id, body.quantity)
    return _cart_response(cart)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, x_tenant_id: str = Header(), x_user_id: str = Header()) -> CartResponse:
    return _cart_response(access.remove_from_cart(x_tenant_id, x_user_id, product_id))


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(x_tenant_id: str = Header(), x_user_id: str = Header()) -> StatusResponse:
    access.clear_cart(x_tenant_id, x_user_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def checkout(body: CheckoutRequest, x_tenant_id: str = Header(), x_user_id: str = Header()) -> OrderResponse:
    order = CheckoutCoordinator().checkout(x_tenant_id, x_user_id, body.shipping_address.model_dump())
    return _order_response(order)


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    status: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = order_queries.DEFAULT_ORDER_PAGE_SIZE,
    x_tenant_id: str = Header(),
    x_user_id: str = Header(),
) -> OrderListResponse:
    result = order_queries.list_orders(
        x_tenant_id,
        x_user_id,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return OrderListResponse(
        orders=[_order_response(order) for order in result.items],
        pagination=PaginationSchema(**result.pagination()),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, x_tenant_id: str = Header(), x_user_id: str = Header()) -> OrderResponse:
    return _order_response(order_queries.get_order(x_tenant_id, x_user_id, order_id))


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def change_order_status(
    order_id: str, body: UpdateOrderStatusRequest, x_tenant_id: str = Header()
) -> OrderResponse:
    return _order_response(update_order_status(x_tenant_id, order_id, body.status))


# ---------------------------------------------------------------------------
# Pricing Rule Router
# ---------------------------------------------------------------------------
pricing_router = APIRouter(prefix="/pricing-rules", tags=["pricing-rules"])


@pricing_router.post("", status_code=201, response_model=PricingRuleResponse)
async def create_pricing_rule(body: CreatePricingRuleRequest, x_tenant_id: str = Header()) -> PricingRuleResponse:
    command = CreatePricingRule(
        tenant_id=x_tenant_id,
        name=body.name,
        discount_kind=body.discount_kind,
        discount_value=body.discount_value,
        product_id=body.product_id,
        conditions=json.dumps(body.conditions.model_dump(exclude_none=True)) if body.conditions else None,
        is_active=body.is_active,
        priority=body.priority,
    )
    rule_id = current_domain.process(command, asynchronous=False)
    return _rule_response(rule_queries.get_rule(x_tenant_id, rule_id))


@pricing_router.get("", response_model=PricingRuleListResponse)
async def list_pricing_rules(
    product_id: str | None = None,
    is_active: bool | None = None,
    discount_kind: str | None = None,
    page: int = 1,
    limit: int = rule_queries.DEFAULT_RULE_PAGE_SIZE,
    x_tenant_id: str = Header(),
) -> PricingRuleListResponse:
    result = rule_queries.list_rules(
        x_tenant_id,
        product_id=product_id,
        is_active=is_active,
        discount_kind=discount_kind,
        page=page,
        limit=limit,
    )
    return PricingRuleListResponse(
        rules=[_rule_response(rule) for rule in result.items],
        pagination=PaginationSchema(**result.pagination()),
    )


@pricing_router.get("/{rule_id}", response_model=PricingRuleResponse)
async def get_pricing_rule(rule_id: str, x_tenant_id: str = Header()) -> PricingRuleResponse:
    return _rule_response(rule_queries.get_rule(x_tenant_id, rule_id))


@pricing_router.patch("/{rule_id}", response_model=PricingRuleResponse)
async def update_pricing_rule(
    rule_id: str, body: UpdatePricingRuleRequest, x_tenant_id: str = Header()
) -> PricingRuleResponse:
    changes = body.model_dump(exclude_unset=True)
    if changes.get("conditions"):
        changes["conditions"] = {k: v for k, v in changes["conditions"].items() if v is not None}
    command = UpdatePricingRule(tenant_id=x_tenant_id, rule_id=rule_id, changes=json.dumps(changes))
    current_domain.process(command, asynchronous=False)
    return _rule_response(rule_queries.get_rule(x_tenant_id, rule_id))


@pricing_router.delete("/{rule_id}", response_model=StatusResponse)
async def delete_pricing_rule(rule_id: str, x_tenant_id: str = Header()) -> StatusResponse:
    current_domain.process(DeletePricingRule(tenant_id=x_tenant_id, rule_id=rule_id), asynchronous=False)
    return StatusResponse()
