"""
店铺设置数据库操作层
"""

from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.database.store_settings_db import StoreSettingsDB


class StoreSettingsRepository:
    """店铺设置数据库操作层"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """获取设置内容，不存在返回None"""
        result = await self.db.execute(
            select(StoreSettingsDB).where(StoreSettingsDB.key == key)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return dict(row.data or {})
