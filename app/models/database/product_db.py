"""
商品数据库模型
"""

from sqlalchemy import Column, String, Numeric, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class ProductDB(Base):
    """商品数据库表"""

    __tablename__ = "products"

    product_id = Column(String(50), primary_key=True, comment="商品ID")
    name = Column(String(200), nullable=False, comment="商品名称")
    category_id = Column(String(50), index=True, comment="分类ID")
    price = Column(Numeric(12, 2), comment="售价")
    status = Column(String(20), default="published", comment="商品状态")
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), comment="更新时间")

    __table_args__ = (
        {'comment': '商品信息表'}
    )
