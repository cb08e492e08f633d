"""
折扣数据库模型
"""

from sqlalchemy import Column, String, Integer, Numeric, Text, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from app.core.database import Base


class DiscountDB(Base):
    """折扣码数据库表"""

    __tablename__ = "discounts"

    # 主键和基本信息
    id = Column(Integer, primary_key=True, autoincrement=True, comment="折扣ID")
    code = Column(String(50), nullable=False, unique=True, index=True, comment="折扣代码")
    type = Column(String(20), nullable=False, comment="折扣类型 percentage/fixed")
    value = Column(Numeric(12, 2), nullable=False, default=0, comment="折扣值")
    description = Column(Text, comment="展示文案")
    allow_auto_apply = Column(Boolean, nullable=False, default=True, comment="是否允许自动应用")

    # 适用范围，均为空表示整单
    product_ids = Column(JSON, comment="适用商品ID列表")
    category_ids = Column(JSON, comment="适用分类ID列表")

    # 门槛和使用限制
    min_order_amount = Column(Numeric(12, 2), comment="最低订单金额")
    max_usage = Column(Integer, comment="总使用次数上限")
    used_count = Column(Integer, nullable=False, default=0, comment="已使用次数")

    # 有效期
    starts_at = Column(DateTime, index=True, comment="生效时间(UTC)")
    expires_at = Column(DateTime, index=True, comment="过期时间(UTC)")
    status = Column(String(20), nullable=False, default="active", index=True, comment="缓存状态")

    # 使用条件
    first_order_only = Column(Boolean, nullable=False, default=False, comment="仅限首单")
    referral_code = Column(String(50), comment="绑定推荐码")

    # 时间戳
    created_at = Column(DateTime, server_default=func.now(), index=True, comment="创建时间")
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), comment="更新时间")

    __table_args__ = (
        {'comment': '折扣码信息表'}
    )
