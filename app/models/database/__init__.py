"""
数据库模型包初始化文件
"""

from .discount_db import DiscountDB
from .order_db import OrderDB
from .product_db import ProductDB
from .store_settings_db import StoreSettingsDB

__all__ = [
    "DiscountDB",
    "OrderDB",
    "ProductDB",
    "StoreSettingsDB"
]
