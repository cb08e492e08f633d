"""
折扣系统数据库表创建脚本
"""

import asyncio
import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.clock import system_clock
from app.core.config import settings
from app.core.database import Base

# 导入所有数据库模型以确保表被注册
from app.models.database import DiscountDB, OrderDB, ProductDB, StoreSettingsDB


async def create_database_if_not_exists():
    """创建数据库（如果不存在）"""
    # 连接到PostgreSQL服务器（不指定数据库）
    server_url = settings.database_url_computed.replace(f"/{settings.db_name}", "/postgres")

    engine = create_async_engine(server_url, isolation_level="AUTOCOMMIT")

    async with engine.connect() as conn:
        result = await conn.execute(
            text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
            {"db_name": settings.db_name}
        )

        if not result.fetchone():
            await conn.execute(text(f'CREATE DATABASE "{settings.db_name}"'))
            print(f"数据库 '{settings.db_name}' 创建成功")
        else:
            print(f"数据库 '{settings.db_name}' 已存在")

    await engine.dispose()


async def create_tables(engine):
    """创建所有数据表"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        print("所有数据表创建成功")


async def create_indexes(engine):
    """创建额外的索引"""
    indexes = [
        # 目录查询和状态同步
        "CREATE INDEX IF NOT EXISTS idx_discounts_status_window ON discounts(status, starts_at, expires_at);",
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_discounts_code_upper ON discounts(UPPER(TRIM(code)));",

        # 首单判断按邮箱忽略大小写查询
        "CREATE INDEX IF NOT EXISTS idx_orders_customer_email_lower ON orders(LOWER(customer_email));",
    ]

    async with engine.begin() as conn:
        for index_sql in indexes:
            await conn.execute(text(index_sql))
        print("所有索引创建成功")


async def insert_sample_discounts(engine):
    """插入示例折扣数据"""
    now = system_clock.now()
    sample_discounts = [
        DiscountDB(
            code="WELCOME10",
            type="percentage",
            value=Decimal("10"),
            first_order_only=True,
            status="active",
            created_at=now
        ),
        DiscountDB(
            code="BIGCART",
            type="percentage",
            value=Decimal("15"),
            min_order_amount=Decimal("1000"),
            status="active",
            created_at=now
        ),
        DiscountDB(
            code="FLAT50",
            type="fixed",
            value=Decimal("50"),
            max_usage=500,
            expires_at=now + timedelta(days=30),
            status="active",
            created_at=now
        ),
    ]

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        for discount in sample_discounts:
            existing = await session.execute(select(DiscountDB.id).where(DiscountDB.code == discount.code))
            if existing.first():
                print(f"折扣已存在: {discount.code}")
                continue
            session.add(discount)
            print(f"插入折扣: {discount.code}")
        await session.commit()


async def main():
    """主函数"""
    print("开始创建折扣系统数据库表...")

    await create_database_if_not_exists()

    engine = create_async_engine(settings.database_url_computed)
    try:
        await create_tables(engine)
        await create_indexes(engine)
        await insert_sample_discounts(engine)
        print("折扣系统数据库初始化完成！")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
