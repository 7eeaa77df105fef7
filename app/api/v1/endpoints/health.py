from fastapi import APIRouter
from datetime import datetime, timezone

from app.core.config import settings

router = APIRouter()

@router.get("/")
async def health():
    """Basic health check"""
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
