from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.database import get_db_session
from app.models.discount import CouponSettings, FeaturedOffer, Offer, ProductOffer, ValidationResult
from app.models.discount_requests import AvailableOffersRequest, ProductOffersRequest, ValidateDiscountRequest
from app.repositories.discount_repository import DiscountRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.store_settings_repository import StoreSettingsRepository
from app.services.common_cache import SimpleCache
from app.services.discount_service import DiscountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/store", tags=["店铺折扣"])


def get_settings_cache(request: Request) -> Optional[SimpleCache]:
    """应用启动时创建的设置缓存"""
    return getattr(request.app.state, "settings_cache", None)


async def get_discount_service(
    session: AsyncSession = Depends(get_db_session),
    cache: Optional[SimpleCache] = Depends(get_settings_cache)
) -> DiscountService:
    return DiscountService(
        discount_repo=DiscountRepository(session),
        order_repo=OrderRepository(session),
        product_repo=ProductRepository(session),
        settings_repo=StoreSettingsRepository(session),
        cache=cache
    )


@router.post("/discounts/validate", response_model=ValidationResult, response_model_exclude_none=True)
async def validate_discount(
    body: ValidateDiscountRequest,
    service: DiscountService = Depends(get_discount_service)
):
    """校验优惠码"""
    return await service.validate(
        code=body.code,
        subtotal=body.subtotal,
        lines=body.items,
        customer_email=body.customer_email,
        customer_referral_code=body.customer_referral_code
    )


@router.post("/discounts/available", response_model=List[Offer])
async def available_offers(
    body: AvailableOffersRequest,
    service: DiscountService = Depends(get_discount_service)
):
    """当前购物车可用的优惠（含待解锁）"""
    return await service.list_available_offers(
        subtotal=body.subtotal,
        lines=body.items,
        customer_email=body.customer_email,
        customer_referral_code=body.customer_referral_code
    )


@router.get("/discounts/featured", response_model=Optional[FeaturedOffer])
async def featured_offer(service: DiscountService = Depends(get_discount_service)):
    """首页推荐优惠"""
    return await service.get_featured_offer()


@router.post("/discounts/for-products", response_model=Dict[str, ProductOffer])
async def offers_for_products(
    body: ProductOffersRequest,
    service: DiscountService = Depends(get_discount_service)
):
    """商品列表折扣角标"""
    return await service.best_offer_per_product(body.product_ids)


@router.get("/settings/coupon", response_model=CouponSettings)
async def coupon_settings(service: DiscountService = Depends(get_discount_service)):
    """优惠券行为设置"""
    return await service.get_coupon_settings()
