"""
店铺折扣接口请求模型
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import EmailStr, Field

from app.models.discount import CamelModel, CartLine


class ValidateDiscountRequest(CamelModel):
    """优惠码校验请求"""

    code: str = Field(..., min_length=1, max_length=50)
    subtotal: Decimal = Field(..., ge=0)
    items: List[CartLine]
    customer_email: Optional[EmailStr] = None
    customer_referral_code: Optional[str] = Field(None, max_length=50)


class AvailableOffersRequest(CamelModel):
    """可用优惠列表请求"""

    subtotal: Decimal = Field(..., ge=0)
    items: List[CartLine]
    customer_email: Optional[EmailStr] = None
    customer_referral_code: Optional[str] = Field(None, max_length=50)


class ProductOffersRequest(CamelModel):
    """商品角标请求"""

    product_ids: List[str] = Field(..., min_length=1, max_length=100)
