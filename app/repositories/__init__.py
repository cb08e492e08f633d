"""
仓库包初始化文件 - 数据库访问层
"""

from .discount_repository import DiscountRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository
from .store_settings_repository import StoreSettingsRepository

__all__ = [
    "DiscountRepository",
    "OrderRepository",
    "ProductRepository",
    "StoreSettingsRepository"
]
