from typing import Any, Dict, Mapping, Optional

from app.core.logging import console_logger
from app.core.utils.enums import PRICE_EVENTS, PRODUCT_EVENTS, StripeEventEnum
from app.services.checkout_normalizer import CheckoutNormalizer
from app.services.product_service import ProductService
from app.services.stripe_gateway import StripeGateway


class WebhookService:
    def __init__(self, gateway: StripeGateway, normalizer: CheckoutNormalizer, product_service: ProductService):
        self.gateway = gateway
        self.normalizer = normalizer
        self.product_service = product_service

    async def handle(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        event = self.gateway.construct_event(payload, sig_header)
        await self.dispatch(event)
        return {"received": True}

    async def dispatch(self, event: Mapping[str, Any]) -> None:
        event_type = event["type"]
        data_object = event["data"]["object"]
        console_logger.info("webhook.received", event_id=event.get("id"), event_type=event_type)

        if event_type == StripeEventEnum.CHECKOUT_SESSION_COMPLETED.value:
            await self.handle_checkout_completed(data_object)
        elif event_type in (StripeEventEnum.SUBSCRIPTION_CREATED.value, StripeEventEnum.SUBSCRIPTION_DELETED.value):
            self.handle_subscription_change(event_type, data_object)
        elif event_type in PRODUCT_EVENTS:
            await self.product_service.handle_product_event(
                data_object, deleted=event_type == StripeEventEnum.PRODUCT_DELETED.value
            )
        elif event_type in PRICE_EVENTS:
            await self.product_service.handle_price_event(
                data_object, deleted=event_type == StripeEventEnum.PRICE_DELETED.value
            )
        else:
            console_logger.info("webhook.unhandled", event_type=event_type)

    async def handle_checkout_completed(self, session: Mapping[str, Any]) -> None:
        # line_items are not included in checkout.session.completed, fetch them separately
        provider_items = await self.gateway.list_session_line_items(session["id"])
        purchased = self.normalizer.decode_line_items(provider_items)
        metadata = session.get("metadata") or {}

        console_logger.info(
            "webhook.checkout_completed",
            session_id=session["id"],
            mode=session.get("mode"),
            customer_id=session.get("customer"),
            is_gift=metadata.get("is_gift") == "true",
            items=[
                {"price_id": item["price_id"], "quantity": item["quantity"], "price": str(item["price"])}
                for item in purchased
            ],
        )

    def handle_subscription_change(self, event_type: str, subscription: Mapping[str, Any]) -> None:
        items = (subscription.get("items") or {}).get("data") or []
        price = (items[0].get("price") or {}) if items else {}
        console_logger.info(
            "webhook.subscription_changed",
            event_type=event_type,
            subscription_id=subscription.get("id"),
            customer_id=subscription.get("customer"),
            status=subscription.get("status"),
            price_id=price.get("id"),
        )
