"""
店铺设置数据库模型
"""

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from app.core.database import Base


class StoreSettingsDB(Base):
    """店铺设置表，每个key一条记录"""

    __tablename__ = "store_settings"

    key = Column(String(50), primary_key=True, comment="设置项")
    data = Column(JSON, nullable=False, default=dict, comment="设置内容")
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), comment="更新时间")

    __table_args__ = (
        {'comment': '店铺设置表'}
    )
