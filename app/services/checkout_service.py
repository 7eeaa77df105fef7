from typing import Any, Dict, Optional

from app.core.config import Settings
from app.core.exceptions import ValidationError
from app.core.logging import console_logger
from app.core.utils.enums import CheckoutModeEnum
from app.core.utils.price_catalog import SubscriptionPriceCatalog
from app.schemas.checkout import CartPaymentIntentRequest, CheckoutRequest, PriceCheckoutRequest
from app.services.checkout_normalizer import CheckoutNormalizer
from app.services.stripe_gateway import StripeGateway


class CheckoutService:
    def __init__(self, settings: Settings, gateway: StripeGateway, catalog: Optional[SubscriptionPriceCatalog] = None):
        self.settings = settings
        self.gateway = gateway
        self.catalog = catalog or SubscriptionPriceCatalog.from_settings(settings)
        self.normalizer = CheckoutNormalizer(currency=settings.CHECKOUT_CURRENCY, catalog=self.catalog)

    def _base_session_params(self, success_url: Optional[str], cancel_url: Optional[str]) -> Dict[str, Any]:
        return {
            "success_url": success_url or self.settings.CHECKOUT_SUCCESS_URL,
            "cancel_url": cancel_url or self.settings.CHECKOUT_CANCEL_URL,
            "allow_promotion_codes": True,
            "billing_address_collection": "auto",
            "locale": self.settings.CHECKOUT_LOCALE,
        }

    def _payment_method_types(self, mode: CheckoutModeEnum):
        if mode is CheckoutModeEnum.SUBSCRIPTION:
            return list(self.settings.SUBSCRIPTION_PAYMENT_METHOD_TYPES)
        return list(self.settings.PAYMENT_METHOD_TYPES)

    def build_session_params(self, request: CheckoutRequest, requested_mode: Optional[CheckoutModeEnum] = None) -> Dict[str, Any]:
        normalized = self.normalizer.normalize(request, requested_mode)

        params = self._base_session_params(request.success_url, request.cancel_url)
        params.update({
            "mode": normalized.mode.value,
            "line_items": normalized.line_items,
            "payment_method_types": self._payment_method_types(normalized.mode),
            "metadata": normalized.metadata,
        })
        if request.customer_email:
            params["customer_email"] = request.customer_email
        if request.user_id:
            params["client_reference_id"] = request.user_id

        if normalized.mode is CheckoutModeEnum.PAYMENT:
            # Only valid in payment mode
            params["customer_creation"] = "always"
            params["payment_intent_data"] = {"setup_future_usage": "off_session"}
        return params

    async def create_checkout_session(self, request: CheckoutRequest, requested_mode: Optional[CheckoutModeEnum] = None) -> Dict[str, Any]:
        params = self.build_session_params(request, requested_mode)
        console_logger.info(
            "checkout.create_session",
            mode=params["mode"],
            line_items=len(params["line_items"]),
            has_customer_email=bool(request.customer_email),
        )
        session = await self.gateway.create_checkout_session(params)
        return {"sessionId": session["id"], "url": session.get("url")}

    async def create_price_checkout(self, request: PriceCheckoutRequest, subscription: bool = False) -> Dict[str, Any]:
        """Checkout for a single catalog price.

        The subscription variant also accepts prices that Stripe stores as
        one-time but the catalog maps to an interval; those are still charged
        in payment mode and flagged in metadata.
        """
        if not request.price_id:
            raise ValidationError("No price ID provided")

        price = await self.gateway.retrieve_price(request.price_id)
        if not price or not price.get("active"):
            raise ValidationError("Invalid or inactive price")

        recurring = price.get("recurring")
        interval = self.catalog.interval_for(request.price_id)
        if subscription and not (recurring or interval):
            raise ValidationError("Price is not a subscription price")

        product = await self.gateway.retrieve_product(price["product"])
        if not product or not product.get("active"):
            raise ValidationError("Invalid or inactive product")

        mode = CheckoutModeEnum.SUBSCRIPTION if (subscription and recurring) else CheckoutModeEnum.PAYMENT

        computed: Dict[str, Any] = {"userId": request.user_id}
        if subscription:
            billing_interval = interval.value if interval else (recurring or {}).get("interval", "unknown")
            computed.update({
                "isSubscription": True,
                "billingInterval": billing_interval,
                "applicationSubscription": True,
            })
        metadata = self.normalizer.attach_metadata(request.metadata, **computed)

        params = self._base_session_params(request.success_url, request.cancel_url)
        params.update({
            "mode": mode.value,
            "line_items": [{"price": request.price_id, "quantity": 1}],
            "payment_method_types": self._payment_method_types(
                CheckoutModeEnum.SUBSCRIPTION if subscription else CheckoutModeEnum.PAYMENT
            ),
            "metadata": metadata,
        })
        if request.customer_id:
            params["customer"] = request.customer_id
        elif request.customer_email:
            params["customer_email"] = request.customer_email
        if request.user_id:
            params["client_reference_id"] = request.user_id

        console_logger.info(
            "checkout.create_price_session",
            price_id=request.price_id,
            mode=mode.value,
            subscription=subscription,
        )
        session = await self.gateway.create_checkout_session(params)
        return {"sessionId": session["id"], "url": session.get("url")}

    async def create_cart_payment_intent(self, request: CartPaymentIntentRequest) -> Dict[str, Any]:
        cart = self.normalizer.coerce_items(request.items)
        amount = self.normalizer.cart_total(cart)
        if amount <= 0:
            raise ValidationError("Payment amount must be greater than zero")

        item_fields: Dict[str, Any] = {}
        for i, item in enumerate(cart):
            item_fields[f"item_{i}_id"] = item.id
            item_fields[f"item_{i}_name"] = item.name
            item_fields[f"item_{i}_price"] = item.price
            if item.quantity != 1:
                item_fields[f"item_{i}_quantity"] = item.quantity
            if item.is_recurring:
                item_fields[f"item_{i}_billing_interval"] = item.billing_interval.value

        metadata = self.normalizer.attach_metadata(
            item_fields,
            customer_email=request.customer_email,
            gift_recipient_email=request.gift_recipient_email,
            is_gift=True if request.gift_recipient_email else None,
        )

        console_logger.info("checkout.create_payment_intent", amount=amount, items=len(cart))
        intent = await self.gateway.create_payment_intent({
            "amount": amount,
            "currency": self.settings.CHECKOUT_CURRENCY,
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        })
        return {"clientSecret": intent["client_secret"]}
