from fastapi import APIRouter, Body, Depends

from app.api.deps import get_checkout_service
from app.core.utils.enums import CheckoutModeEnum
from app.schemas.checkout import (
    CartPaymentIntentRequest,
    CheckoutRequest,
    CheckoutSessionResponse,
    ClientSecretResponse,
    PriceCheckoutRequest,
)
from app.services.checkout_service import CheckoutService

router = APIRouter(tags=["checkout"])


@router.post("/create-checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    request: CheckoutRequest = Body(...),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Checkout for a cart. The mode is taken from the body or derived from the items."""
    return await service.create_checkout_session(request)


@router.post("/create-checkout", response_model=CheckoutSessionResponse)
async def create_checkout(
    request: CheckoutRequest = Body(...),
    service: CheckoutService = Depends(get_checkout_service),
):
    """One-time payment checkout. Subscription items in the cart are left out."""
    return await service.create_checkout_session(request, CheckoutModeEnum.PAYMENT)


@router.post("/create-subscription-checkout", response_model=CheckoutSessionResponse)
async def create_subscription_checkout(
    request: CheckoutRequest = Body(...),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Subscription checkout. One-time items in the cart are left out."""
    return await service.create_checkout_session(request, CheckoutModeEnum.SUBSCRIPTION)


@router.post("/create-subscription", response_model=CheckoutSessionResponse)
async def create_subscription(
    request: PriceCheckoutRequest = Body(...),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.create_price_checkout(request, subscription=True)


@router.post("/create-payment-intent", response_model=CheckoutSessionResponse)
async def create_payment_intent(
    request: PriceCheckoutRequest = Body(...),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.create_price_checkout(request)


@router.post("/create-payment-intent/cart", response_model=ClientSecretResponse)
async def create_cart_payment_intent(
    request: CartPaymentIntentRequest = Body(...),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Payment Intent for an embedded (mobile) checkout of the whole cart."""
    return await service.create_cart_payment_intent(request)
