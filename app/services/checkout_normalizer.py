from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.core.utils.enums import CheckoutModeEnum
from app.core.utils.money import from_minor_units, to_minor_units
from app.core.utils.price_catalog import SubscriptionPriceCatalog
from app.schemas.checkout import CartItem, CheckoutRequest

# Stripe metadata limits
METADATA_MAX_KEYS = 50
METADATA_MAX_KEY_LENGTH = 40
METADATA_MAX_VALUE_LENGTH = 500

EMPTY_MODE_MESSAGES = {
    CheckoutModeEnum.PAYMENT: "No one-time payment items provided for payment checkout",
    CheckoutModeEnum.SUBSCRIPTION: "No subscription items provided for subscription checkout",
}


@dataclass
class NormalizedCheckout:
    mode: CheckoutModeEnum
    line_items: List[Dict[str, Any]]
    metadata: Dict[str, str] = field(default_factory=dict)


class CheckoutNormalizer:
    """Turns a cart into Stripe Checkout line items, a mode and flat metadata.

    Items that reference a catalog price (``stripe_price_id``) are passed
    through untouched. Everything else gets an inline ``price_data``
    descriptor whose ``unit_amount`` is the item price in cents, rounded
    half up.
    """

    def __init__(self, currency: str = "usd", catalog: Optional[SubscriptionPriceCatalog] = None):
        self.currency = currency
        self.catalog = catalog or SubscriptionPriceCatalog()

    def coerce_items(self, items: Any) -> List[CartItem]:
        if not isinstance(items, (list, tuple)):
            raise ValidationError("Items are required and must be an array")
        if not items:
            raise ValidationError("No items provided for checkout")

        cart: List[CartItem] = []
        for index, item in enumerate(items):
            if isinstance(item, CartItem):
                cart.append(item)
                continue
            try:
                cart.append(CartItem.model_validate(item))
            except PydanticValidationError as e:
                first = e.errors()[0]
                location = ".".join(str(part) for part in first.get("loc", ()))
                raise ValidationError(f"Invalid item at position {index}: {location} {first.get('msg')}".strip())
        return cart

    def is_recurring(self, item: CartItem) -> bool:
        if item.is_recurring:
            return True
        return self.catalog.is_subscription(item.stripe_price_id)

    @staticmethod
    def unit_amount(item: CartItem) -> int:
        try:
            return to_minor_units(item.price)
        except ValueError as e:
            raise ValidationError(f"Invalid price for item '{item.name or item.id or 'unnamed'}': {e}")

    def build_line_item(self, item: CartItem) -> Dict[str, Any]:
        if item.stripe_price_id:
            return {"price": item.stripe_price_id, "quantity": item.quantity}

        if item.price is None:
            raise ValidationError(f"Item '{item.name or item.id or 'unnamed'}' needs a stripe_price_id or a numeric price")
        if not item.name or not item.name.strip():
            raise ValidationError("Items without a stripe_price_id must have a name")

        product_data: Dict[str, Any] = {"name": item.name}
        if item.description and item.description.strip():
            product_data["description"] = item.description

        price_data: Dict[str, Any] = {
            "currency": self.currency,
            "product_data": product_data,
            "unit_amount": self.unit_amount(item),
        }
        if item.is_recurring:
            price_data["recurring"] = {"interval": item.billing_interval.value}

        return {"price_data": price_data, "quantity": item.quantity}

    def build_line_items(self, items: Any) -> List[Dict[str, Any]]:
        return [self.build_line_item(item) for item in self.coerce_items(items)]

    def filter_for_mode(self, items: Any, mode: CheckoutModeEnum) -> List[CartItem]:
        cart = self.coerce_items(items)
        wants_recurring = mode is CheckoutModeEnum.SUBSCRIPTION
        selected = [item for item in cart if self.is_recurring(item) == wants_recurring]
        if not selected:
            raise ValidationError(EMPTY_MODE_MESSAGES[mode])
        return selected

    def select_mode(self, items: Any, requested: Optional[CheckoutModeEnum] = None) -> CheckoutModeEnum:
        cart = self.coerce_items(items)
        if requested is not None:
            self.filter_for_mode(cart, requested)
            return requested

        recurring = [self.is_recurring(item) for item in cart]
        if all(recurring):
            return CheckoutModeEnum.SUBSCRIPTION
        if not any(recurring):
            return CheckoutModeEnum.PAYMENT
        raise ValidationError(
            "Cart mixes one-time and subscription items; check them out separately"
        )

    def attach_metadata(self, base: Optional[Mapping[str, Any]] = None, **fields: Any) -> Dict[str, str]:
        merged: Dict[str, str] = {}
        for source in (base or {}, fields):
            for key, value in source.items():
                if value is None:
                    continue
                merged[str(key)] = self._metadata_value(key, value)

        if len(merged) > METADATA_MAX_KEYS:
            raise ValidationError(f"Metadata can have at most {METADATA_MAX_KEYS} keys")
        for key, value in merged.items():
            if len(key) > METADATA_MAX_KEY_LENGTH:
                raise ValidationError(f"Metadata key '{key}' is longer than {METADATA_MAX_KEY_LENGTH} characters")
            if len(value) > METADATA_MAX_VALUE_LENGTH:
                raise ValidationError(f"Metadata value for '{key}' is longer than {METADATA_MAX_VALUE_LENGTH} characters")
        return merged

    @staticmethod
    def _metadata_value(key: Any, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float, Decimal)):
            return str(value)
        raise ValidationError(f"Metadata value for '{key}' must be a string or number")

    def decode_line_items(self, provider_items: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Read Stripe's echoed line items (``list_line_items`` data) back into price/quantity pairs."""
        decoded = []
        for line in provider_items:
            price = line.get("price") or {}
            unit_amount = price.get("unit_amount")
            if unit_amount is None and line.get("quantity"):
                unit_amount = int(line.get("amount_subtotal", 0)) // int(line["quantity"])
            decoded.append({
                "price_id": price.get("id"),
                "product_id": price.get("product"),
                "quantity": int(line.get("quantity") or 1),
                "unit_amount": unit_amount,
                "price": from_minor_units(unit_amount) if unit_amount is not None else None,
            })
        return decoded

    def normalize(self, request: CheckoutRequest, requested_mode: Optional[CheckoutModeEnum] = None) -> NormalizedCheckout:
        requested_mode = requested_mode or request.mode
        cart = self.coerce_items(request.items)
        mode = self.select_mode(cart, requested_mode)
        if requested_mode is not None:
            cart = self.filter_for_mode(cart, mode)

        line_items = [self.build_line_item(item) for item in cart]
        metadata = self.attach_metadata(
            request.metadata,
            gift_recipient_email=request.gift_recipient_email or None,
            is_gift=True if request.gift_recipient_email else None,
            userId=request.user_id,
            isSubscription=mode is CheckoutModeEnum.SUBSCRIPTION,
        )
        return NormalizedCheckout(mode=mode, line_items=line_items, metadata=metadata)

    def cart_total(self, items: Sequence[CartItem]) -> int:
        """Sum of inline item prices in cents, multiplied by quantity."""
        total = 0
        for item in items:
            if item.price is None:
                raise ValidationError(f"Item '{item.name or item.id or 'unnamed'}' has no price")
            total += self.unit_amount(item) * item.quantity
        return total
