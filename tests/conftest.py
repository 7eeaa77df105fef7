from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import Settings
from app.core.utils.price_catalog import SubscriptionPriceCatalog
from app.main import app
from app.services.product_service import ProductService
from app.services.stripe_gateway import StripeGateway

class FakeStripeGateway(StripeGateway):
    """Records outgoing Stripe calls and answers from in-memory fixtures.

    Signature verification is inherited so webhook tests exercise the real
    Stripe signing scheme.
    """

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.calls: List[tuple] = []
        self.prices: Dict[str, Dict[str, Any]] = {}
        self.products: Dict[str, Dict[str, Any]] = {}
        self.coupons: Dict[str, Dict[str, Any]] = {}
        self.session_line_items: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_with: Optional[Exception] = None

    def _record(self, name: str, *args):
        self.calls.append((name,) + args)
        if self.fail_with is not None:
            raise self.fail_with

    def calls_named(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    async def create_checkout_session(self, params):
        self._record("create_checkout_session", params)
        session_id = f"cs_test_{len(self.calls)}"
        return {"id": session_id, "url": f"https://checkout.stripe.com/c/pay/{session_id}"}

    async def list_session_line_items(self, session_id, limit=100):
        self._record("list_session_line_items", session_id)
        return self.session_line_items.get(session_id, [])

    async def create_payment_intent(self, params):
        self._record("create_payment_intent", params)
        return {"id": "pi_test_1", "client_secret": "pi_test_1_secret_abc"}

    async def retrieve_price(self, price_id):
        self._record("retrieve_price", price_id)
        return self.prices.get(price_id)

    async def retrieve_product(self, product_id, expand=None):
        self._record("retrieve_product", product_id)
        return self.products.get(product_id)

    async def list_products(self, active=True, limit=100):
        self._record("list_products")
        return [p for p in self.products.values() if not active or p.get("active")]

    async def list_prices(self, product=None, active=True, limit=100):
        self._record("list_prices", product)
        return [
            p for p in self.prices.values()
            if (product is None or p["product"] == product) and (active is None or p.get("active") == active)
        ]

    async def create_coupon(self, params):
        self._record("create_coupon", params)
        coupon = dict(params, object="coupon", valid=True)
        self.coupons[params["id"]] = coupon
        return coupon

    async def list_coupons(self, limit=100):
        self._record("list_coupons")
        return list(self.coupons.values())

    async def delete_coupon(self, coupon_id):
        self._record("delete_coupon", coupon_id)
        self.coupons.pop(coupon_id, None)
        return {"id": coupon_id, "object": "coupon", "deleted": True}

    async def create_webhook_endpoint(self, url, enabled_events, description):
        self._record("create_webhook_endpoint", url, enabled_events)
        return {"id": "we_test_1", "url": url, "secret": "whsec_new"}


class RecordingLogger:
    """Stands in for console_logger and keeps every event with its fields."""

    def __init__(self):
        self.events: List[tuple] = []

    def _record(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))

    debug = info = warning = error = exception = _record

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [fields for name, fields in self.events if name == event]


class FakeCatalogRepository:
    def __init__(self):
        self.products: Dict[str, Dict[str, Any]] = {}
        self.prices: Dict[str, Dict[str, Any]] = {}

    async def upsert_product(self, product):
        row = dict(self.products.get(product["stripe_product_id"], {}), **product)
        row.setdefault("id", len(self.products) + 1)
        self.products[product["stripe_product_id"]] = row
        return row

    async def deactivate_product(self, stripe_product_id):
        if stripe_product_id in self.products:
            self.products[stripe_product_id]["active"] = False

    async def upsert_price(self, price):
        self.prices[price["stripe_price_id"]] = dict(price)
        return price

    async def deactivate_price(self, stripe_price_id):
        if stripe_price_id in self.prices:
            self.prices[stripe_price_id]["active"] = False


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_WEBHOOK_SECRET="whsec_test_secret",
        SUBSCRIPTION_PRICE_INTERVALS={"price_coaching_month": "month", "price_coaching_year": "year"},
        SYNC_PRODUCT_IDS=[],
        PUBLIC_BASE_URL="https://shop.example.com",
    )


@pytest.fixture
def gateway(test_settings) -> FakeStripeGateway:
    return FakeStripeGateway(test_settings)


@pytest.fixture
def catalog_repository() -> FakeCatalogRepository:
    return FakeCatalogRepository()


@pytest.fixture
def product_service(test_settings, gateway, catalog_repository) -> ProductService:
    return ProductService(
        test_settings,
        gateway,
        repository=catalog_repository,
        catalog=SubscriptionPriceCatalog.from_settings(test_settings),
    )


@pytest.fixture
def client(test_settings, gateway, product_service):
    app.dependency_overrides[deps.get_settings] = lambda: test_settings
    app.dependency_overrides[deps.get_gateway] = lambda: gateway
    app.dependency_overrides[deps.get_product_service] = lambda: product_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def record_logs(monkeypatch):
    """Replace console_logger in the given module with a RecordingLogger."""
    def patch(module) -> RecordingLogger:
        logger = RecordingLogger()
        monkeypatch.setattr(module, "console_logger", logger)
        return logger
    return patch
