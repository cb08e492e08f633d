"""
订单相关数据库模型
只映射折扣评估需要读取的字段
"""

from sqlalchemy import Column, String, Integer, Numeric, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class OrderDB(Base):
    """订单数据库表"""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True, comment="订单ID")
    order_number = Column(String(50), unique=True, comment="订单号")
    customer_email = Column(String(255), nullable=False, index=True, comment="下单邮箱")

    # 金额信息
    subtotal = Column(Numeric(12, 2), nullable=False, default=0, comment="商品小计")
    discount_amount = Column(Numeric(12, 2), default=0, comment="折扣金额")
    total = Column(Numeric(12, 2), nullable=False, default=0, comment="实付金额")
    coupon_code = Column(String(50), comment="使用的优惠码")

    status = Column(String(20), default="pending", index=True, comment="订单状态")
    created_at = Column(DateTime, server_default=func.now(), comment="创建时间")

    __table_args__ = (
        {'comment': '订单主表'}
    )
