from fastapi import APIRouter, Body, Depends

from app.api.deps import get_coupon_service
from app.schemas.coupon import CouponCreateRequest, CouponDeleteResponse
from app.services.coupon_service import CouponService

router = APIRouter(tags=["coupons"])


@router.post("")
async def create_coupon(
    request: CouponCreateRequest = Body(...),
    service: CouponService = Depends(get_coupon_service),
):
    return await service.create_coupon(request)


@router.get("")
async def list_coupons(service: CouponService = Depends(get_coupon_service)):
    return await service.list_coupons()


@router.delete("/{coupon_id}", response_model=CouponDeleteResponse)
async def delete_coupon(coupon_id: str, service: CouponService = Depends(get_coupon_service)):
    return await service.delete_coupon(coupon_id)
