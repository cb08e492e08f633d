"""
折扣业务服务层
对外提供优惠码校验、可用优惠列表、商品角标等能力

每次调用都重新读取折扣记录，并基于时间戳重新判断，不依赖缓存的status字段；
存储层异常直接向上抛出，由接口层转换为5xx，不会被当作"优惠码无效"
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from app.core.clock import SystemClock, system_clock
from app.core.config import settings
from app.models.discount import (
    CartLine,
    CouponSettings,
    Discount,
    FeaturedOffer,
    Offer,
    OrderContext,
    ProductOffer,
    ValidationResult,
)
from app.repositories.discount_repository import DiscountRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.store_settings_repository import StoreSettingsRepository
from app.services import eligibility
from app.services.best_offer_selector import BestPerProductSelector
from app.services.common_cache import SimpleCache
from app.services.discount_text import describe_discount
from app.services.offer_catalog import OfferCatalog
from app.services.offer_ranker import OfferRanker

logger = logging.getLogger(__name__)

COUPON_SETTINGS_KEY = "coupon"


class DiscountService:
    """折扣业务服务"""

    def __init__(
        self,
        discount_repo: DiscountRepository,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        settings_repo: Optional[StoreSettingsRepository] = None,
        cache: Optional[SimpleCache] = None,
        clock: SystemClock = system_clock,
        currency_symbol: Optional[str] = None
    ):
        self.discount_repo = discount_repo
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.settings_repo = settings_repo
        self.cache = cache
        self.clock = clock
        self.currency_symbol = currency_symbol if currency_symbol is not None else settings.currency_symbol
        self.catalog = OfferCatalog(discount_repo)
        self.ranker = OfferRanker(self.currency_symbol)
        self.selector = BestPerProductSelector(self.currency_symbol)

    async def validate(
        self,
        code: str,
        subtotal: Decimal,
        lines: List[CartLine],
        customer_email: Optional[str] = None,
        customer_referral_code: Optional[str] = None
    ) -> ValidationResult:
        """校验优惠码并计算优惠金额"""
        normalized = eligibility.normalize_code(code)
        if not normalized:
            return self._to_validation(eligibility.not_found())

        db_discount = await self.discount_repo.get_by_code(normalized)
        if db_discount is None:
            logger.info(f"优惠码不存在: {normalized}")
            return self._to_validation(eligibility.not_found())

        discount = self.discount_repo.to_model(db_discount)
        context = await self._build_context(
            [discount], subtotal, lines, customer_email, customer_referral_code
        )
        result = eligibility.evaluate(discount, context, self.clock.now(), self.currency_symbol)

        if not result.eligible:
            logger.info(f"优惠码不可用: {normalized}, 原因: {result.reason.value}")
        return self._to_validation(result)

    async def list_available_offers(
        self,
        subtotal: Decimal,
        lines: List[CartLine],
        customer_email: Optional[str] = None,
        customer_referral_code: Optional[str] = None
    ) -> List[Offer]:
        """获取当前购物车可用（含待解锁）的优惠"""
        now = self.clock.now()
        candidates = await self.catalog.fetch(now)
        if not candidates:
            return []

        context = await self._build_context(
            candidates, subtotal, lines, customer_email, customer_referral_code
        )
        return self.ranker.rank(candidates, context, now)

    async def best_offer_per_product(self, product_ids: List[str]) -> Dict[str, ProductOffer]:
        """为每个商品挑选一个最佳折扣角标"""
        now = self.clock.now()
        candidates = await self.catalog.fetch(now)
        if not candidates:
            return {}

        category_of = {}
        if any(d.scope_category_ids for d in candidates):
            category_of = await self.product_repo.get_category_map(list(product_ids))

        return self.selector.select(product_ids, candidates, category_of, now)

    async def get_featured_offer(self) -> Optional[FeaturedOffer]:
        """首页推荐：整单可用、无门槛、折扣值最高的一个"""
        now = self.clock.now()
        candidates = await self.catalog.fetch_featured_candidates(now)

        for discount in candidates:
            if not discount.is_whole_order:
                continue
            if eligibility.check_window(discount, now) is not None:
                continue
            return FeaturedOffer(
                code=discount.normalized_code,
                description=describe_discount(discount, self.currency_symbol)
            )
        return None

    async def get_coupon_settings(self) -> CouponSettings:
        """获取店铺优惠券行为设置"""
        cache_key = f"settings:{COUPON_SETTINGS_KEY}"

        if self.cache:
            cached = await self.cache.get(cache_key)
            if cached:
                return CouponSettings(**cached)

        data = None
        if self.settings_repo:
            data = await self.settings_repo.get(COUPON_SETTINGS_KEY)
        coupon_settings = CouponSettings(**(data or {}))

        if self.cache:
            await self.cache.set(
                cache_key,
                coupon_settings.model_dump(mode="json"),
                ttl=settings.coupon_settings_cache_ttl
            )

        return coupon_settings

    async def redeem(self, code: str) -> bool:
        """下单提交时记录一次使用，已达上限返回False"""
        success = await self.discount_repo.increment_usage(code, now=self.clock.now())
        if not success:
            logger.warning(f"优惠码使用次数更新失败: {eligibility.normalize_code(code)}")
        return success

    async def _build_context(
        self,
        discounts: List[Discount],
        subtotal: Decimal,
        lines: List[CartLine],
        customer_email: Optional[str],
        customer_referral_code: Optional[str]
    ) -> OrderContext:
        """按需查询分类和历史订单，构建评估上下文"""
        category_of = {}
        if any(d.scope_category_ids for d in discounts):
            category_of = await self.product_repo.get_category_map(
                [line.product_id for line in lines]
            )

        email = (customer_email or "").strip() or None
        has_prior_order = None
        if email and any(d.first_order_only for d in discounts):
            has_prior_order = await self.order_repo.exists_by_customer_email(email)

        return OrderContext(
            subtotal=subtotal,
            lines=lines,
            customer_email=email,
            customer_referral_code=customer_referral_code,
            category_of=category_of,
            has_prior_order=has_prior_order
        )

    def _to_validation(self, result) -> ValidationResult:
        if result.eligible:
            return ValidationResult(
                valid=True,
                discount_amount=result.discount_amount,
                message=f"You save {self.currency_symbol}{result.discount_amount:.2f}"
            )
        return ValidationResult(valid=False, message=result.message, reason=result.reason)
