from pydantic import BaseModel
from typing import Optional, Union


class CouponCreateRequest(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    value: Optional[Union[float, str]] = None
    duration: Optional[str] = None
    duration_in_months: Optional[Union[int, str]] = None
    redeem_by: Optional[int] = None


class CouponDeleteResponse(BaseModel):
    success: bool
    deleted: str
