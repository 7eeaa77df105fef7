from enum import Enum


class CheckoutModeEnum(Enum):
    PAYMENT = "payment"
    SUBSCRIPTION = "subscription"


class BillingIntervalEnum(Enum):
    MONTH = "month"
    YEAR = "year"
    ONE_TIME = "one-time"

    @property
    def is_recurring(self) -> bool:
        return self is not BillingIntervalEnum.ONE_TIME


class CouponTypeEnum(Enum):
    PERCENT = "percent"
    AMOUNT = "amount"


class CouponDurationEnum(Enum):
    ONCE = "once"
    REPEATING = "repeating"
    FOREVER = "forever"


#########################################
# Stripe webhook event types
#########################################
class StripeEventEnum(Enum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    SUBSCRIPTION_CREATED = "customer.subscription.created"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    PRODUCT_CREATED = "product.created"
    PRODUCT_UPDATED = "product.updated"
    PRODUCT_DELETED = "product.deleted"
    PRICE_CREATED = "price.created"
    PRICE_UPDATED = "price.updated"
    PRICE_DELETED = "price.deleted"


PRODUCT_EVENTS = {
    StripeEventEnum.PRODUCT_CREATED.value,
    StripeEventEnum.PRODUCT_UPDATED.value,
    StripeEventEnum.PRODUCT_DELETED.value,
}

PRICE_EVENTS = {
    StripeEventEnum.PRICE_CREATED.value,
    StripeEventEnum.PRICE_UPDATED.value,
    StripeEventEnum.PRICE_DELETED.value,
}
