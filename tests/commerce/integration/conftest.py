import pytest
from commerce.api import cart_router, order_router, pricing_router, register_commerce_exception_handlers
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(pricing_router)
    register_commerce_exception_handlers(app)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def headers():
    return {"X-Tenant-ID": "tenant-a", "X-User-ID": "user-001"}
