from fastapi import APIRouter, Depends

from app.api.deps import get_product_service
from app.schemas.product import CatalogResponse, SyncResult, WebhookRegistration
from app.services.product_service import ProductService

router = APIRouter(tags=["products"])


@router.get("/get-products", response_model=CatalogResponse)
async def get_products(service: ProductService = Depends(get_product_service)):
    return await service.get_products()


@router.post("/sync-products", response_model=SyncResult)
async def sync_products(service: ProductService = Depends(get_product_service)):
    """Mirror the Stripe catalog into Supabase."""
    return await service.sync_products()


@router.post("/sync-products/register-webhook", response_model=WebhookRegistration)
async def register_webhook(service: ProductService = Depends(get_product_service)):
    return await service.register_webhook()
