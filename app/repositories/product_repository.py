"""
商品数据库操作层（只读）
"""

from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database.product_db import ProductDB


class ProductRepository:
    """商品数据库操作层"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_category_map(self, product_ids: Iterable[str]) -> Dict[str, Optional[str]]:
        """批量获取商品分类，未找到的商品不出现在结果中"""
        ids = list(dict.fromkeys(pid for pid in product_ids if pid))
        if not ids:
            return {}

        result = await self.db.execute(
            select(ProductDB.product_id, ProductDB.category_id)
            .where(ProductDB.product_id.in_(ids))
        )
        return {row.product_id: row.category_id for row in result.fetchall()}
