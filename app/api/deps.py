from fastapi import Depends

from app.core.config import Settings, settings
from app.core.utils.price_catalog import SubscriptionPriceCatalog
from app.services.checkout_service import CheckoutService
from app.services.coupon_service import CouponService
from app.services.product_service import ProductService
from app.services.stripe_gateway import StripeGateway
from app.services.webhook_service import WebhookService


def get_settings() -> Settings:
    return settings


def get_gateway(settings: Settings = Depends(get_settings)) -> StripeGateway:
    return StripeGateway(settings)


def get_price_catalog(settings: Settings = Depends(get_settings)) -> SubscriptionPriceCatalog:
    return SubscriptionPriceCatalog.from_settings(settings)


def get_checkout_service(
    settings: Settings = Depends(get_settings),
    gateway: StripeGateway = Depends(get_gateway),
    catalog: SubscriptionPriceCatalog = Depends(get_price_catalog),
) -> CheckoutService:
    return CheckoutService(settings, gateway, catalog)


def get_coupon_service(
    settings: Settings = Depends(get_settings),
    gateway: StripeGateway = Depends(get_gateway),
) -> CouponService:
    return CouponService(settings, gateway)


def get_product_service(
    settings: Settings = Depends(get_settings),
    gateway: StripeGateway = Depends(get_gateway),
    catalog: SubscriptionPriceCatalog = Depends(get_price_catalog),
) -> ProductService:
    return ProductService(settings, gateway, catalog=catalog)


def get_webhook_service(
    gateway: StripeGateway = Depends(get_gateway),
    checkout_service: CheckoutService = Depends(get_checkout_service),
    product_service: ProductService = Depends(get_product_service),
) -> WebhookService:
    return WebhookService(gateway, checkout_service.normalizer, product_service)
