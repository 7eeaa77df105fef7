import time

import pytest

from app.core.exceptions import ValidationError
from app.schemas.coupon import CouponCreateRequest
from app.services.coupon_service import CouponService, coupon_id_from_name


def test_coupon_id_is_cleaned_from_name():
    assert coupon_id_from_name("Summer Sale 20%!") == "SUMMERSALE20"


def test_percent_coupon_params(test_settings, gateway):
    service = CouponService(test_settings, gateway)

    params = service.build_coupon_params(CouponCreateRequest(name="Spring 15", type="percent", value="15", duration="once"))

    assert params == {"id": "SPRING15", "name": "Spring 15", "duration": "once", "percent_off": 15.0}


def test_amount_coupon_params_are_in_cents(test_settings, gateway):
    service = CouponService(test_settings, gateway)

    params = service.build_coupon_params(CouponCreateRequest(
        name="Ten off", type="amount", value=10.5, duration="repeating", duration_in_months="3",
    ))

    assert params["amount_off"] == 1050
    assert params["currency"] == "usd"
    assert params["duration_in_months"] == 3


def test_duration_in_months_ignored_unless_repeating(test_settings, gateway):
    service = CouponService(test_settings, gateway)

    params = service.build_coupon_params(CouponCreateRequest(
        name="Forever", type="percent", value=5, duration="forever", duration_in_months=6,
    ))

    assert "duration_in_months" not in params


@pytest.mark.parametrize("payload, message", [
    ({"name": "X", "type": "percent", "duration": "once"}, "Missing required fields"),
    ({"name": "X", "type": "bogus", "value": 5, "duration": "once"}, "Unsupported coupon type"),
    ({"name": "X", "type": "percent", "value": 150, "duration": "once"}, "between 0 and 100"),
    ({"name": "X", "type": "amount", "value": "ten", "duration": "once"}, "must be numeric"),
    ({"name": "X", "type": "amount", "value": 1e30, "duration": "once"}, "Invalid coupon amount"),
    ({"name": "X", "type": "amount", "value": "2000000", "duration": "once"}, "exceeds the maximum"),
    ({"name": "!!!", "type": "percent", "value": 5, "duration": "once"}, "letters or digits"),
])
def test_invalid_coupon_requests(test_settings, gateway, payload, message):
    service = CouponService(test_settings, gateway)

    with pytest.raises(ValidationError, match=message):
        service.build_coupon_params(CouponCreateRequest(**payload))


def test_redeem_by_must_be_in_the_future(test_settings, gateway):
    service = CouponService(test_settings, gateway)
    request = CouponCreateRequest(name="Old", type="percent", value=5, duration="once", redeem_by=1_000)

    with pytest.raises(ValidationError, match="must be in the future"):
        service.build_coupon_params(request, now=2_000)

    future = CouponCreateRequest(name="New", type="percent", value=5, duration="once", redeem_by=3_000)
    assert service.build_coupon_params(future, now=2_000)["redeem_by"] == 3_000


def test_coupon_crud_endpoints(client, gateway):
    response = client.post("/api/v1/coupons", json={
        "name": "Summer 20",
        "type": "percent",
        "value": 20,
        "duration": "once",
        "redeem_by": int(time.time()) + 3600,
    })
    assert response.status_code == 200
    assert response.json()["id"] == "SUMMER20"

    response = client.get("/api/v1/coupons")
    assert response.status_code == 200
    assert [coupon["id"] for coupon in response.json()] == ["SUMMER20"]

    response = client.delete("/api/v1/coupons/SUMMER20")
    assert response.status_code == 200
    assert response.json() == {"success": True, "deleted": "SUMMER20"}
    assert gateway.coupons == {}


def test_create_coupon_with_missing_fields(client, gateway):
    response = client.post("/api/v1/coupons", json={"name": "Nope"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    assert gateway.calls == []
