from decimal import Decimal
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional

from app.core.utils.enums import BillingIntervalEnum, CheckoutModeEnum


class CartItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    quantity: int = Field(default=1, ge=1)
    billing_interval: Optional[BillingIntervalEnum] = Field(default=None, alias="billingInterval")
    stripe_price_id: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if v is None:
            return None
        return str(v)

    @field_validator("price", mode="before")
    @classmethod
    def float_price_as_decimal_string(cls, v):
        # 19.995 must stay 19.995, not its binary expansion
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v):
        # A missing or zero quantity means one unit
        return v or 1

    @field_validator("billing_interval", "stripe_price_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_recurring(self) -> bool:
        return self.billing_interval is not None and self.billing_interval.is_recurring


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: Optional[List[CartItem]] = None
    success_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("successUrl", "success_url"))
    cancel_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("cancelUrl", "cancel_url"))
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    gift_recipient_email: Optional[str] = Field(default=None, alias="giftRecipientEmail")
    user_id: Optional[str] = Field(default=None, alias="userId")
    mode: Optional[CheckoutModeEnum] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PriceCheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price_id: Optional[str] = Field(default=None, alias="priceId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    customer_id: Optional[str] = Field(default=None, alias="customerId")
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    success_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("successUrl", "success_url"))
    cancel_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("cancelUrl", "cancel_url"))
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CartPaymentIntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: Optional[List[CartItem]] = None
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    gift_recipient_email: Optional[str] = Field(default=None, alias="giftRecipientEmail")


class CheckoutSessionResponse(BaseModel):
    sessionId: str
    url: Optional[str] = None


class ClientSecretResponse(BaseModel):
    clientSecret: str
