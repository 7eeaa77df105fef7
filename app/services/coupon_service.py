import re
import time
from typing import Any, Dict, List, Optional

from app.core.config import Settings
from app.core.exceptions import ValidationError
from app.core.logging import console_logger
from app.core.utils.enums import CouponDurationEnum, CouponTypeEnum
from app.core.utils.money import to_minor_units
from app.schemas.coupon import CouponCreateRequest
from app.services.stripe_gateway import StripeGateway


def coupon_id_from_name(name: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", name.upper())


class CouponService:
    def __init__(self, settings: Settings, gateway: StripeGateway):
        self.settings = settings
        self.gateway = gateway

    def build_coupon_params(self, request: CouponCreateRequest, now: Optional[int] = None) -> Dict[str, Any]:
        if not request.name or not request.type or request.value in (None, "") or not request.duration:
            raise ValidationError("Missing required fields")

        try:
            coupon_type = CouponTypeEnum(request.type)
            duration = CouponDurationEnum(request.duration)
        except ValueError:
            raise ValidationError(f"Unsupported coupon type '{request.type}' or duration '{request.duration}'")

        coupon_id = coupon_id_from_name(request.name)
        if not coupon_id:
            raise ValidationError("Coupon name must contain letters or digits")

        params: Dict[str, Any] = {
            "id": coupon_id,
            "name": request.name,
            "duration": duration.value,
        }

        if coupon_type is CouponTypeEnum.PERCENT:
            try:
                percent_off = float(request.value)
            except ValueError:
                raise ValidationError(f"Coupon value must be numeric, got '{request.value}'")
            if not 0 < percent_off <= 100:
                raise ValidationError("Percentage must be between 0 and 100")
            params["percent_off"] = percent_off
        else:
            try:
                amount_off = to_minor_units(request.value)
            except ValueError as e:
                raise ValidationError(f"Invalid coupon amount: {e}")
            if amount_off <= 0:
                raise ValidationError("Amount off must be greater than zero")
            params["amount_off"] = amount_off
            params["currency"] = self.settings.CHECKOUT_CURRENCY

        if duration is CouponDurationEnum.REPEATING and request.duration_in_months:
            try:
                params["duration_in_months"] = int(request.duration_in_months)
            except ValueError:
                raise ValidationError("duration_in_months must be an integer")

        if request.redeem_by:
            now = int(time.time()) if now is None else now
            if request.redeem_by <= now:
                raise ValidationError("Expiration date must be in the future")
            params["redeem_by"] = request.redeem_by

        return params

    async def create_coupon(self, request: CouponCreateRequest):
        params = self.build_coupon_params(request)
        coupon = await self.gateway.create_coupon(params)
        console_logger.info("coupon.created", coupon_id=coupon["id"])
        return coupon

    async def list_coupons(self) -> List[Any]:
        return await self.gateway.list_coupons(limit=100)

    async def delete_coupon(self, coupon_id: Optional[str]) -> Dict[str, Any]:
        if not coupon_id:
            raise ValidationError("Coupon ID is required")
        deleted = await self.gateway.delete_coupon(coupon_id)
        console_logger.info("coupon.deleted", coupon_id=deleted["id"])
        return {"success": True, "deleted": deleted["id"]}
