"""
折扣码数据库操作层
"""

from typing import List, Optional, Dict
from datetime import datetime

from sqlalchemy import select, update, and_, or_, desc, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.discount import Discount, DiscountStatus
from app.models.database.discount_db import DiscountDB
from app.services.eligibility import normalize_code


class DiscountRepository:
    """折扣码数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _window_conditions(now: datetime):
        """目录查询条件：启用或待生效，且处于有效期内"""
        return and_(
            DiscountDB.status.in_([DiscountStatus.ACTIVE.value, DiscountStatus.SCHEDULED.value]),
            or_(DiscountDB.expires_at.is_(None), DiscountDB.expires_at > now),
            or_(DiscountDB.starts_at.is_(None), DiscountDB.starts_at <= now)
        )

    async def get_by_code(self, code: str) -> Optional[DiscountDB]:
        """根据折扣代码获取折扣（忽略大小写和首尾空格）"""
        normalized = normalize_code(code)
        if not normalized:
            return None

        result = await self.db.execute(
            select(DiscountDB).where(func.upper(func.trim(DiscountDB.code)) == normalized)
        )
        return result.scalars().first()

    async def find_in_window(self, now: datetime) -> List[DiscountDB]:
        """获取当前时间窗口内的候选折扣，按创建顺序返回"""
        query = select(DiscountDB).where(
            self._window_conditions(now)
        ).order_by(DiscountDB.created_at, DiscountDB.id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_featured_candidates(self, now: datetime) -> List[DiscountDB]:
        """获取无门槛的候选折扣，按折扣值从高到低"""
        query = select(DiscountDB).where(
            and_(
                self._window_conditions(now),
                or_(DiscountDB.min_order_amount.is_(None), DiscountDB.min_order_amount == 0)
            )
        ).order_by(desc(DiscountDB.value), DiscountDB.created_at, DiscountDB.id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def sync_statuses(self, now: datetime) -> Dict[str, int]:
        """同步缓存状态：过期的停用，到期的待生效折扣启用"""
        expired = await self.db.execute(
            update(DiscountDB)
            .where(
                and_(
                    DiscountDB.status == DiscountStatus.ACTIVE.value,
                    DiscountDB.expires_at.is_not(None),
                    DiscountDB.expires_at < now
                )
            )
            .values(status=DiscountStatus.DISABLED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        activated = await self.db.execute(
            update(DiscountDB)
            .where(
                and_(
                    DiscountDB.status == DiscountStatus.SCHEDULED.value,
                    or_(DiscountDB.starts_at.is_(None), DiscountDB.starts_at <= now)
                )
            )
            .values(status=DiscountStatus.ACTIVE.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        return {"disabled": expired.rowcount, "activated": activated.rowcount}

    async def increment_usage(self, code: str, now: Optional[datetime] = None) -> bool:
        """原子地增加使用次数，已达上限时不更新"""
        normalized = normalize_code(code)
        if not normalized:
            return False

        values = {"used_count": DiscountDB.used_count + 1}
        if now is not None:
            values["updated_at"] = now

        result = await self.db.execute(
            update(DiscountDB)
            .where(
                and_(
                    func.upper(func.trim(DiscountDB.code)) == normalized,
                    or_(
                        DiscountDB.max_usage.is_(None),
                        DiscountDB.used_count < DiscountDB.max_usage
                    )
                )
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def to_model(self, db_discount: DiscountDB) -> Discount:
        """转换为Pydantic模型"""
        return Discount(
            id=db_discount.id,
            code=db_discount.code,
            type=db_discount.type,
            value=db_discount.value,
            description=db_discount.description,
            allow_auto_apply=True if db_discount.allow_auto_apply is None else db_discount.allow_auto_apply,
            product_ids=db_discount.product_ids or [],
            category_ids=db_discount.category_ids or [],
            min_order_amount=db_discount.min_order_amount,
            max_usage=db_discount.max_usage,
            used_count=db_discount.used_count or 0,
            starts_at=db_discount.starts_at,
            expires_at=db_discount.expires_at,
            status=db_discount.status or DiscountStatus.ACTIVE,
            first_order_only=bool(db_discount.first_order_only),
            referral_code=db_discount.referral_code,
            created_at=db_discount.created_at,
            updated_at=db_discount.updated_at
        )
