from fastapi import APIRouter, Depends, Header, Request

from app.api.deps import get_webhook_service
from app.services.webhook_service import WebhookService

router = APIRouter(tags=["webhook"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    service: WebhookService = Depends(get_webhook_service),
):
    payload = await request.body()
    return await service.handle(payload, stripe_signature)
