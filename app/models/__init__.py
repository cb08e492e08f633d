"""
数据模型包初始化文件
"""

from .discount import (
    Discount,
    DiscountType,
    DiscountStatus,
    IneligibleReason,
    CartLine,
    OrderContext,
    EligibilityResult,
    Offer,
    ProductOffer,
    FeaturedOffer,
    CouponSettings,
    AutoApplyStrategy,
    ValidationResult
)

__all__ = [
    "Discount",
    "DiscountType",
    "DiscountStatus",
    "IneligibleReason",
    "CartLine",
    "OrderContext",
    "EligibilityResult",
    "Offer",
    "ProductOffer",
    "FeaturedOffer",
    "CouponSettings",
    "AutoApplyStrategy",
    "ValidationResult"
]
