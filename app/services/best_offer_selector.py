"""
商品列表最佳折扣角标
没有购物车上下文，跳过首单和推荐码限制

按目录顺序扫描候选折扣并维护当前最佳：
- 都是百分比：严格更大才替换，相同保留先出现的
- 百分比对固定金额：百分比总是替换
- 固定金额：从不替换当前最佳，先出现的固定金额胜出
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from app.core.config import settings
from app.models.discount import Discount, DiscountType, ProductOffer
from app.services import eligibility
from app.services.discount_text import describe_discount


class BestPerProductSelector:
    """每个商品最多选一个折扣用于展示"""

    def __init__(self, currency_symbol: Optional[str] = None):
        self.currency_symbol = currency_symbol if currency_symbol is not None else settings.currency_symbol

    @staticmethod
    def applies_to(discount: Discount, product_id: str, category_id: Optional[str]) -> bool:
        if discount.product_ids:
            return product_id in discount.product_ids
        return category_id is not None and category_id in discount.category_ids

    @staticmethod
    def is_better(candidate: Discount, best: Optional[Discount]) -> bool:
        if best is None:
            return True
        if candidate.type != DiscountType.PERCENTAGE:
            return False
        if best.type != DiscountType.PERCENTAGE:
            return True
        return candidate.value > best.value

    def select(
        self,
        product_ids: Iterable[str],
        candidates: List[Discount],
        category_of: Dict[str, Optional[str]],
        now: datetime
    ) -> Dict[str, ProductOffer]:
        usable = [d for d in candidates if eligibility.check_window(d, now) is None]

        result: Dict[str, ProductOffer] = {}
        for product_id in product_ids:
            category_id = category_of.get(product_id)
            best: Optional[Discount] = None

            for discount in usable:
                if not self.applies_to(discount, product_id, category_id):
                    continue
                if self.is_better(discount, best):
                    best = discount

            if best is not None:
                result[product_id] = ProductOffer(
                    code=best.normalized_code,
                    value=best.value,
                    type=best.type,
                    description=describe_discount(best, self.currency_symbol)
                )

        return result
