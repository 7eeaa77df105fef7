from typing import Dict, Mapping, Optional

from app.core.config import Settings
from app.core.exceptions import ConfigurationError
from app.core.utils.enums import BillingIntervalEnum


class SubscriptionPriceCatalog:
    """Lookup of Stripe price ids that are sold as subscriptions.

    Some catalog prices are configured as one-time prices in Stripe but are
    billed monthly or yearly by the business. The mapping is loaded from
    configuration so it can change without touching the checkout logic.
    """

    def __init__(self, intervals: Optional[Mapping[str, str]] = None):
        self._intervals: Dict[str, BillingIntervalEnum] = {}
        for price_id, interval in (intervals or {}).items():
            try:
                parsed = BillingIntervalEnum(interval)
            except ValueError:
                parsed = None
            if parsed is None or not parsed.is_recurring:
                raise ConfigurationError(
                    f"SUBSCRIPTION_PRICE_INTERVALS: price {price_id} must map to 'month' or 'year', got '{interval}'"
                )
            self._intervals[price_id] = parsed

    @classmethod
    def from_settings(cls, settings: Settings) -> "SubscriptionPriceCatalog":
        return cls(settings.SUBSCRIPTION_PRICE_INTERVALS)

    def interval_for(self, price_id: Optional[str]) -> Optional[BillingIntervalEnum]:
        if not price_id:
            return None
        return self._intervals.get(price_id)

    def is_subscription(self, price_id: Optional[str]) -> bool:
        return self.interval_for(price_id) is not None

    def __contains__(self, price_id: str) -> bool:
        return price_id in self._intervals

    def __len__(self) -> int:
        return len(self._intervals)
