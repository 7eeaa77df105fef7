from typing import Any, Dict, List, Optional

import stripe
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.exceptions import UpstreamError, ValidationError
from app.core.logging import console_logger


class StripeGateway:
    """Async facade over the Stripe SDK.

    The SDK is blocking, so every call runs in the threadpool. The API key is
    passed per call from the injected settings instead of the module-level
    ``stripe.api_key``. Stripe errors are re-raised as ``UpstreamError`` with
    the provider message intact.
    """

    def __init__(self, settings: Settings):
        settings.require("STRIPE_SECRET_KEY")
        self.settings = settings
        self._options = {
            "api_key": settings.STRIPE_SECRET_KEY,
            "stripe_version": settings.STRIPE_API_VERSION,
        }

    async def _call(self, operation: str, func, *args, **kwargs):
        try:
            return await run_in_threadpool(func, *args, **self._options, **kwargs)
        except (stripe.InvalidRequestError, stripe.CardError) as e:
            console_logger.warning("stripe.rejected", operation=operation, code=e.code, error=e.user_message or str(e))
            raise UpstreamError(e.user_message or str(e), status_code=400, code=e.code)
        except stripe.StripeError as e:
            console_logger.error("stripe.failed", operation=operation, error_type=e.__class__.__name__, error=str(e))
            raise UpstreamError(e.user_message or str(e), code=e.code)

    # Checkout
    async def create_checkout_session(self, params: Dict[str, Any]):
        return await self._call("checkout.Session.create", stripe.checkout.Session.create, **params)

    async def list_session_line_items(self, session_id: str, limit: int = 100) -> List[Any]:
        result = await self._call(
            "checkout.Session.list_line_items",
            stripe.checkout.Session.list_line_items,
            session_id,
            limit=limit,
        )
        return list(result["data"])

    async def create_payment_intent(self, params: Dict[str, Any]):
        return await self._call("PaymentIntent.create", stripe.PaymentIntent.create, **params)

    # Catalog
    async def retrieve_price(self, price_id: str):
        return await self._call("Price.retrieve", stripe.Price.retrieve, price_id)

    async def retrieve_product(self, product_id: str, expand: Optional[List[str]] = None):
        if expand:
            return await self._call("Product.retrieve", stripe.Product.retrieve, product_id, expand=expand)
        return await self._call("Product.retrieve", stripe.Product.retrieve, product_id)

    async def list_products(self, active: bool = True, limit: int = 100) -> List[Any]:
        result = await self._call("Product.list", stripe.Product.list, active=active, limit=limit)
        return list(result["data"])

    async def list_prices(self, product: Optional[str] = None, active: Optional[bool] = True, limit: int = 100) -> List[Any]:
        params: Dict[str, Any] = {"limit": limit}
        if product:
            params["product"] = product
        if active is not None:
            params["active"] = active
        result = await self._call("Price.list", stripe.Price.list, **params)
        return list(result["data"])

    # Coupons
    async def create_coupon(self, params: Dict[str, Any]):
        return await self._call("Coupon.create", stripe.Coupon.create, **params)

    async def list_coupons(self, limit: int = 100) -> List[Any]:
        result = await self._call("Coupon.list", stripe.Coupon.list, limit=limit)
        return list(result["data"])

    async def delete_coupon(self, coupon_id: str):
        return await self._call("Coupon.delete", stripe.Coupon.delete, coupon_id)

    # Webhooks
    async def create_webhook_endpoint(self, url: str, enabled_events: List[str], description: str):
        return await self._call(
            "WebhookEndpoint.create",
            stripe.WebhookEndpoint.create,
            url=url,
            enabled_events=enabled_events,
            description=description,
        )

    def construct_event(self, payload: bytes, sig_header: Optional[str]):
        self.settings.require("STRIPE_WEBHOOK_SECRET")
        if not sig_header:
            raise ValidationError("Missing Stripe signature")
        try:
            return stripe.Webhook.construct_event(payload, sig_header, self.settings.STRIPE_WEBHOOK_SECRET)
        except ValueError:
            raise ValidationError("Invalid payload")
        except stripe.SignatureVerificationError:
            raise ValidationError("Invalid signature")
