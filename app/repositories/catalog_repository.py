from typing import Any, Dict, Optional

from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from app.core.config import Settings
from app.core.exceptions import UpstreamError


class CatalogRepository:
    """Mirror of the Stripe catalog in the Supabase ``products`` and ``prices`` tables."""

    PRODUCTS_TABLE = "products"
    PRICES_TABLE = "prices"

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogRepository":
        settings.require("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")
        return cls(create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY))

    async def _execute(self, query):
        try:
            return await run_in_threadpool(query.execute)
        except Exception as e:
            raise UpstreamError(f"Supabase request failed: {e}")

    async def upsert_product(self, product: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        query = self.client.table(self.PRODUCTS_TABLE).upsert(product, on_conflict="stripe_product_id")
        res = await self._execute(query)
        return res.data[0] if res.data else None

    async def deactivate_product(self, stripe_product_id: str) -> None:
        query = (
            self.client.table(self.PRODUCTS_TABLE)
            .update({"active": False})
            .eq("stripe_product_id", stripe_product_id)
        )
        await self._execute(query)

    async def upsert_price(self, price: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        query = self.client.table(self.PRICES_TABLE).upsert(price, on_conflict="stripe_price_id")
        res = await self._execute(query)
        return res.data[0] if res.data else None

    async def deactivate_price(self, stripe_price_id: str) -> None:
        query = (
            self.client.table(self.PRICES_TABLE)
            .update({"active": False})
            .eq("stripe_price_id", stripe_price_id)
        )
        await self._execute(query)
