from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from app.core.config import Settings
from app.core.exceptions import AppError
from app.core.logging import console_logger
from app.core.utils.enums import BillingIntervalEnum, PRICE_EVENTS, PRODUCT_EVENTS
from app.core.utils.price_catalog import SubscriptionPriceCatalog
from app.repositories.catalog_repository import CatalogRepository
from app.services.stripe_gateway import StripeGateway

CATALOG_WEBHOOK_EVENTS = sorted(PRODUCT_EVENTS | PRICE_EVENTS)


def _product_id_of(price: Mapping[str, Any]) -> str:
    product = price.get("product")
    if isinstance(product, Mapping):
        return product["id"]
    return product


class ProductService:
    """Lists the Stripe catalog and mirrors it into Supabase."""

    def __init__(
        self,
        settings: Settings,
        gateway: StripeGateway,
        repository: Optional[CatalogRepository] = None,
        catalog: Optional[SubscriptionPriceCatalog] = None,
    ):
        self.settings = settings
        self.gateway = gateway
        self._repository = repository
        self.catalog = catalog or SubscriptionPriceCatalog.from_settings(settings)

    @property
    def repository(self) -> CatalogRepository:
        # Listing products does not need Supabase, so the client is built lazily
        if self._repository is None:
            self._repository = CatalogRepository.from_settings(self.settings)
        return self._repository

    async def get_products(self) -> Dict[str, List[Dict[str, Any]]]:
        products = await self.gateway.list_products(active=True, limit=100)
        prices = await self.gateway.list_prices(active=True, limit=100)
        return {
            "products": [
                {
                    "id": product["id"],
                    "name": product["name"],
                    "description": product.get("description") or "",
                    "default_price": product.get("default_price"),
                    "metadata": dict(product.get("metadata") or {}),
                    "active": product.get("active", True),
                }
                for product in products
            ],
            "prices": [
                {
                    "id": price["id"],
                    "unit_amount": price.get("unit_amount"),
                    "currency": price["currency"],
                    "recurring": dict(price["recurring"]) if price.get("recurring") else None,
                    "product": _product_id_of(price),
                }
                for price in prices
            ],
        }

    def price_interval(self, price: Mapping[str, Any]) -> str:
        recurring = price.get("recurring")
        if recurring and recurring.get("interval"):
            return recurring["interval"]
        interval = self.catalog.interval_for(price.get("id"))
        if interval is not None:
            return interval.value
        return BillingIntervalEnum.ONE_TIME.value

    @staticmethod
    def product_row(product: Mapping[str, Any]) -> Dict[str, Any]:
        images = product.get("images") or []
        return {
            "name": product["name"],
            "description": product.get("description") or "",
            "image_url": images[0] if images else None,
            "stripe_product_id": product["id"],
            "active": product.get("active", True),
            "metadata": dict(product.get("metadata") or {}),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

    def price_row(self, price: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "product_id": _product_id_of(price),
            "active": price.get("active", True),
            "unit_amount": price.get("unit_amount"),
            "currency": price["currency"],
            "interval": self.price_interval(price),
            "stripe_price_id": price["id"],
        }

    async def _products_to_sync(self) -> List[Any]:
        if not self.settings.SYNC_PRODUCT_IDS:
            return await self.gateway.list_products(active=True, limit=100)

        products = []
        for product_id in self.settings.SYNC_PRODUCT_IDS:
            try:
                product = await self.gateway.retrieve_product(product_id)
            except AppError as e:
                console_logger.error("product_sync.retrieve_failed", product_id=product_id, error=e.message)
                continue
            if product.get("active"):
                products.append(product)
            else:
                console_logger.info("product_sync.skip_inactive", product_id=product_id)
        return products

    async def sync_products(self) -> Dict[str, Any]:
        console_logger.info("product_sync.start", targeted=len(self.settings.SYNC_PRODUCT_IDS) or "all")
        results: Dict[str, List[Dict[str, Any]]] = {"products": [], "prices": []}
        repository = self.repository

        for product in await self._products_to_sync():
            try:
                row = await repository.upsert_product(self.product_row(product))
                results["products"].append({
                    "name": product["name"],
                    "action": "synced",
                    "id": row.get("id") if row else None,
                })

                prices = await self.gateway.list_prices(product=product["id"], active=None)
                for price in prices:
                    price_row = self.price_row(price)
                    await repository.upsert_price(price_row)
                    results["prices"].append({
                        "product_name": product["name"],
                        "action": "synced",
                        "amount": (price.get("unit_amount") or 0) / 100,
                        "currency": price["currency"],
                        "interval": price_row["interval"],
                    })
            except AppError as e:
                console_logger.error("product_sync.product_failed", product_id=product["id"], error=e.message)
                continue

        console_logger.info(
            "product_sync.done",
            products=len(results["products"]),
            prices=len(results["prices"]),
        )
        return {
            "success": True,
            "message": "Stripe products and prices synchronized with Supabase",
            "summary": {
                "products_processed": len(results["products"]),
                "prices_processed": len(results["prices"]),
            },
            "details": results,
        }

    async def handle_product_event(self, product: Mapping[str, Any], deleted: bool = False) -> None:
        if deleted or product.get("deleted"):
            await self.repository.deactivate_product(product["id"])
            console_logger.info("product_sync.product_deactivated", product_id=product["id"])
            return
        await self.repository.upsert_product(self.product_row(product))
        console_logger.info("product_sync.product_upserted", product_id=product["id"])

    async def handle_price_event(self, price: Mapping[str, Any], deleted: bool = False) -> None:
        if deleted or price.get("deleted") or price.get("active") is False:
            await self.repository.deactivate_price(price["id"])
            console_logger.info("product_sync.price_deactivated", price_id=price["id"])
            return
        await self.repository.upsert_price(self.price_row(price))
        console_logger.info("product_sync.price_upserted", price_id=price["id"])

    async def register_webhook(self, url: Optional[str] = None) -> Dict[str, Any]:
        url = url or self.settings.webhook_url
        endpoint = await self.gateway.create_webhook_endpoint(
            url=url,
            enabled_events=CATALOG_WEBHOOK_EVENTS,
            description="Catalog sync webhook",
        )
        console_logger.info("product_sync.webhook_registered", webhook_id=endpoint["id"], url=url)
        return {
            "success": True,
            "message": "Webhook registered successfully",
            "webhookId": endpoint["id"],
            "webhookUrl": url,
            "secret": endpoint.get("secret"),
        }
