import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.exceptions import ConfigurationError
from app.core.utils.enums import BillingIntervalEnum
from app.core.utils.price_catalog import SubscriptionPriceCatalog


def test_subscription_price_intervals_from_json_env(monkeypatch):
    monkeypatch.setenv("SUBSCRIPTION_PRICE_INTERVALS", '{"price_a": "month", "price_b": "year"}')
    monkeypatch.setenv("SYNC_PRODUCT_IDS", '["prod_a"]')

    settings = Settings(_env_file=None)
    catalog = SubscriptionPriceCatalog.from_settings(settings)

    assert catalog.interval_for("price_a") is BillingIntervalEnum.MONTH
    assert catalog.interval_for("price_b") is BillingIntervalEnum.YEAR
    assert catalog.interval_for("price_c") is None
    assert settings.SYNC_PRODUCT_IDS == ["prod_a"]


@pytest.mark.parametrize("interval", ["one-time", "weekly"])
def test_catalog_rejects_non_recurring_mapping(interval):
    with pytest.raises(ConfigurationError, match="must map to 'month' or 'year'"):
        SubscriptionPriceCatalog({"price_a": interval})


def test_validate_required_checks_price_intervals():
    settings = Settings(
        _env_file=None,
        STRIPE_SECRET_KEY="sk_test_123",
        SUBSCRIPTION_PRICE_INTERVALS={"price_x": "weekly"},
    )

    with pytest.raises(ConfigurationError, match="price_x"):
        settings.validate_required()


def test_debug_is_off_by_default(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)

    assert Settings(_env_file=None).DEBUG is False


def test_require_names_missing_settings():
    settings = Settings(_env_file=None, STRIPE_SECRET_KEY="", SUPABASE_URL="")

    with pytest.raises(ConfigurationError) as excinfo:
        settings.require("STRIPE_SECRET_KEY", "SUPABASE_URL")

    assert "STRIPE_SECRET_KEY, SUPABASE_URL" in excinfo.value.message


def test_startup_fails_fast_without_stripe_key(monkeypatch):
    from app import main

    monkeypatch.setattr(main, "settings", Settings(_env_file=None, STRIPE_SECRET_KEY=""))

    with pytest.raises(ConfigurationError):
        with TestClient(main.app):
            pass


def test_health(client):
    response = client.get("/api/v1/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_startup_fails_fast_with_bad_price_interval(monkeypatch):
    from app import main

    monkeypatch.setattr(main, "settings", Settings(
        _env_file=None,
        STRIPE_SECRET_KEY="sk_test_123",
        SUBSCRIPTION_PRICE_INTERVALS={"price_x": "weekly"},
    ))

    with pytest.raises(ConfigurationError, match="SUBSCRIPTION_PRICE_INTERVALS"):
        with TestClient(main.app):
            pass
