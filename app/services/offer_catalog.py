"""
折扣目录
按时间窗口和状态粗筛候选折扣，每次调用都重新读取数据库
"""

from datetime import datetime
from typing import List

from app.models.discount import Discount
from app.repositories.discount_repository import DiscountRepository
from app.services.eligibility import in_catalog_window


class OfferCatalog:
    """候选折扣目录"""

    def __init__(self, discount_repo: DiscountRepository):
        self.discount_repo = discount_repo

    def _to_candidates(self, db_discounts, now: datetime) -> List[Discount]:
        # 查询条件之外再按同一规则过滤一次，保持目录顺序
        discounts = [self.discount_repo.to_model(db_discount) for db_discount in db_discounts]
        return [discount for discount in discounts if in_catalog_window(discount, now)]

    async def fetch(self, now: datetime) -> List[Discount]:
        """获取当前窗口内的折扣"""
        return self._to_candidates(await self.discount_repo.find_in_window(now), now)

    async def fetch_featured_candidates(self, now: datetime) -> List[Discount]:
        """获取无门槛候选折扣，按折扣值降序"""
        return self._to_candidates(await self.discount_repo.find_featured_candidates(now), now)
