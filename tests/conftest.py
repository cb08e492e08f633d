"""
测试配置文件 - pytest fixtures和共用配置
"""

import pytest
import pytest_asyncio
from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.clock import FixedClock
from app.core.database import Base
from app.models.database import DiscountDB  # 导入包时注册全部表
from app.models.discount import CartLine, Discount, OrderContext


# 所有测试共用的"当前时间"
TEST_NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """测试数据库引擎 - 内存SQLite，每个测试独立建表"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncSession:
    """测试数据库会话"""
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture
def now():
    return TEST_NOW


@pytest.fixture
def fixed_clock():
    """固定时钟"""
    return FixedClock(TEST_NOW)


@pytest.fixture
def make_discount():
    """折扣模型工厂，默认是一个整单10%的启用折扣"""
    def _make(**overrides) -> Discount:
        data = {
            "id": 1,
            "code": "SAVE10",
            "type": "percentage",
            "value": Decimal("10"),
            "status": "active",
            "created_at": datetime(2024, 1, 1),
        }
        data.update(overrides)
        return Discount(**data)

    return _make


@pytest.fixture
def make_context():
    """订单上下文工厂，未指定小计时按购物车行汇总"""
    def _make(lines: List[tuple] = None, subtotal=None, **overrides) -> OrderContext:
        cart_lines = [
            CartLine(product_id=pid, quantity=qty, unit_price=Decimal(str(price)))
            for pid, qty, price in (lines or [])
        ]
        if subtotal is None:
            subtotal = sum((line.line_total for line in cart_lines), Decimal("0"))
        return OrderContext(subtotal=Decimal(str(subtotal)), lines=cart_lines, **overrides)

    return _make


@pytest.fixture
def make_discount_db():
    """折扣数据库记录工厂"""
    def _make(**overrides) -> DiscountDB:
        data = {
            "code": "SAVE10",
            "type": "percentage",
            "value": Decimal("10.00"),
            "status": "active",
            "used_count": 0,
            "allow_auto_apply": True,
            "first_order_only": False,
            "created_at": datetime(2024, 1, 1),
        }
        data.update(overrides)
        return DiscountDB(**data)

    return _make


@pytest_asyncio.fixture
async def seed(db_session):
    """向测试库写入记录并提交"""
    async def _seed(*rows):
        for row in rows:
            db_session.add(row)
        await db_session.commit()
        return rows

    return _seed
