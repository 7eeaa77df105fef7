from fastapi import APIRouter
from app.api.v1.endpoints import health, checkout, coupons, products, webhook

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(checkout.router)
api_router.include_router(products.router)
api_router.include_router(coupons.router, prefix="/coupons", tags=["coupons"])
api_router.include_router(webhook.router)
