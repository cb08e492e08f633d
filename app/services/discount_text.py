"""
折扣展示文案
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from app.models.discount import Discount, DiscountType


def format_number(value: Decimal) -> str:
    """去掉多余的小数位: 10.00 -> 10, 12.50 -> 12.5"""
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def format_whole_amount(value: Decimal, currency_symbol: str) -> str:
    """金额取整展示，四舍五入"""
    whole = value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{currency_symbol}{int(whole)}"


def describe_value(discount_type: DiscountType, value: Decimal, currency_symbol: str) -> str:
    if discount_type == DiscountType.PERCENTAGE:
        return f"{format_number(value)}% off"
    return f"{format_whole_amount(value, currency_symbol)} off"


def describe_discount(
    discount: Discount,
    currency_symbol: str,
    include_minimum: bool = False
) -> str:
    """优先使用自定义文案，否则按类型生成"""
    custom = (discount.description or "").strip()
    if custom:
        return custom

    text = describe_value(discount.type, discount.value, currency_symbol)
    minimum: Optional[Decimal] = discount.min_order_amount
    if include_minimum and minimum is not None and minimum > 0:
        text = f"{text} on orders over {format_whole_amount(minimum, currency_symbol)}"
    return text
