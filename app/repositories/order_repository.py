"""
订单数据库操作层（只读）
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database.order_db import OrderDB


class OrderRepository:
    """订单数据库操作层"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists_by_customer_email(self, email: str) -> bool:
        """该邮箱是否已有订单（忽略大小写）"""
        normalized = (email or "").strip().lower()
        if not normalized:
            return False

        result = await self.db.execute(
            select(OrderDB.id)
            .where(func.lower(OrderDB.customer_email) == normalized)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None
