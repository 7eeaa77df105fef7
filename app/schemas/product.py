from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ProductOut(BaseModel):
    id: str
    name: str
    description: str = ""
    default_price: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    active: bool = True


class PriceOut(BaseModel):
    id: str
    unit_amount: Optional[int] = None
    currency: str
    recurring: Optional[Dict[str, Any]] = None
    product: str


class CatalogResponse(BaseModel):
    products: List[ProductOut]
    prices: List[PriceOut]


class SyncSummary(BaseModel):
    products_processed: int
    prices_processed: int


class SyncDetails(BaseModel):
    products: List[Dict[str, Any]] = Field(default_factory=list)
    prices: List[Dict[str, Any]] = Field(default_factory=list)


class SyncResult(BaseModel):
    success: bool
    message: str
    summary: SyncSummary
    details: SyncDetails


class WebhookRegistration(BaseModel):
    success: bool
    message: str
    webhookId: str
    webhookUrl: str
    secret: Optional[str] = None
