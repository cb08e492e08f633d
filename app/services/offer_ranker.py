"""
可用优惠列表
在资格评估的基础上构建"无需输入优惠码即可使用"的优惠列表

与校验接口唯一的差异：未达到最低订单金额不会被排除，
而是标记为locked，并按最低金额预估可省金额，用于凑单提示
"""

from datetime import datetime
from typing import List, Optional

from app.core.config import settings
from app.models.discount import Discount, Offer, OrderContext
from app.services import eligibility
from app.services.discount_text import describe_discount


class OfferRanker:
    """可用优惠构建器"""

    def __init__(self, currency_symbol: Optional[str] = None):
        self.currency_symbol = currency_symbol if currency_symbol is not None else settings.currency_symbol

    def rank(self, candidates: List[Discount], context: OrderContext, now: datetime) -> List[Offer]:
        """逐个评估候选折扣，不做排序"""
        offers = []
        for discount in candidates:
            offer = self.build_offer(discount, context, now)
            if offer is not None:
                offers.append(offer)
        return offers

    def build_offer(self, discount: Discount, context: OrderContext, now: datetime) -> Optional[Offer]:
        """评估单个折扣，不可用时返回None"""
        if eligibility.check_window(discount, now) is not None:
            return None
        if eligibility.check_gates(discount, context) is not None:
            return None

        base = eligibility.applicable_subtotal(discount, context)
        if base <= 0:
            return None

        gap_amount = eligibility.minimum_shortfall(discount, context.subtotal)
        locked = gap_amount is not None
        if locked:
            # 按刚好达到最低金额预估
            discount_amount = eligibility.compute_amount(discount, discount.min_order_amount)
        else:
            discount_amount = eligibility.compute_amount(discount, base)

        uses_left = None
        if discount.max_usage is not None:
            uses_left = max(0, discount.max_usage - discount.used_count)

        return Offer(
            code=discount.normalized_code,
            type=discount.type,
            value=discount.value,
            min_order_amount=discount.min_order_amount,
            discount_amount=discount_amount,
            description=describe_discount(discount, self.currency_symbol, include_minimum=True),
            allow_auto_apply=discount.allow_auto_apply,
            created_at=discount.created_at,
            locked=locked,
            gap_amount=gap_amount,
            expires_at=discount.expires_at,
            uses_left=uses_left
        )
