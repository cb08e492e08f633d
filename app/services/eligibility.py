"""
折扣资格评估
纯函数实现，不读写任何外部状态；校验、可用列表、商品角标三条链路共用这里的判断

检查顺序固定，决定了返回哪一个不可用原因：
1. 已停用  2. 未到生效时间  3. 已过期  4. 次数用尽
5. 首单限制  6. 推荐码限制  7. 最低订单金额
8. 计算适用小计  9. 适用小计为0  10. 计算折扣金额
"""

import math
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from app.core.config import settings
from app.models.discount import (
    Discount,
    DiscountStatus,
    DiscountType,
    EligibilityResult,
    IneligibleReason,
    OrderContext,
)
from app.services.discount_text import format_whole_amount

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

CATALOG_STATUSES = (DiscountStatus.ACTIVE, DiscountStatus.SCHEDULED)

MSG_NOT_FOUND = "Invalid or expired coupon code"
MSG_DISABLED = "This coupon is no longer active"
MSG_NOT_YET_ACTIVE = "This coupon is not yet active"
MSG_EXPIRED = "This coupon has expired"
MSG_USAGE_EXHAUSTED = "This coupon has reached its usage limit"
MSG_EMAIL_REQUIRED = "Enter your email to use this first-order offer"
MSG_NOT_FIRST_ORDER = "This offer is for first-time customers only"
MSG_REFERRAL_REQUIRED = "This offer requires a referral link"
MSG_NOT_APPLICABLE = "This coupon does not apply to any items in your cart"


def round_money(amount: Decimal) -> Decimal:
    """金额保留两位小数，四舍五入"""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def in_catalog_window(discount: Discount, now: datetime) -> bool:
    """与目录查询条件一致的内存判断"""
    if discount.status not in CATALOG_STATUSES:
        return False
    if discount.expires_at is not None and discount.expires_at <= now:
        return False
    if discount.starts_at is not None and discount.starts_at > now:
        return False
    return True


def check_window(discount: Discount, now: datetime) -> Optional[EligibilityResult]:
    """步骤1-4：状态、有效期、使用次数"""
    if discount.status == DiscountStatus.DISABLED:
        return EligibilityResult.rejected(IneligibleReason.DISABLED, MSG_DISABLED)

    if discount.starts_at is not None and discount.starts_at > now:
        return EligibilityResult.rejected(IneligibleReason.NOT_YET_ACTIVE, MSG_NOT_YET_ACTIVE)

    if discount.expires_at is not None and discount.expires_at < now:
        return EligibilityResult.rejected(IneligibleReason.EXPIRED, MSG_EXPIRED)

    if discount.max_usage is not None and discount.used_count >= discount.max_usage:
        return EligibilityResult.rejected(IneligibleReason.USAGE_EXHAUSTED, MSG_USAGE_EXHAUSTED)

    return None


def check_gates(discount: Discount, context: OrderContext) -> Optional[EligibilityResult]:
    """步骤5-6：首单限制和推荐码限制"""
    if discount.first_order_only:
        email = (context.customer_email or "").strip()
        if not email:
            return EligibilityResult.rejected(IneligibleReason.NOT_FIRST_ORDER, MSG_EMAIL_REQUIRED)
        if context.has_prior_order is None:
            raise ValueError("首单折扣评估前必须先查询订单记录")
        if context.has_prior_order:
            return EligibilityResult.rejected(IneligibleReason.NOT_FIRST_ORDER, MSG_NOT_FIRST_ORDER)

    required_referral = normalize_code(discount.referral_code)
    if required_referral:
        if normalize_code(context.customer_referral_code) != required_referral:
            return EligibilityResult.rejected(IneligibleReason.REFERRAL_REQUIRED, MSG_REFERRAL_REQUIRED)

    return None


def minimum_shortfall(discount: Discount, subtotal: Decimal) -> Optional[Decimal]:
    """未达到最低订单金额时返回差额"""
    minimum = discount.min_order_amount
    if minimum is not None and minimum > 0 and subtotal < minimum:
        return minimum - subtotal
    return None


def check_minimum(
    discount: Discount,
    subtotal: Decimal,
    currency_symbol: Optional[str] = None
) -> Optional[EligibilityResult]:
    """步骤7：最低订单金额"""
    shortfall = minimum_shortfall(discount, subtotal)
    if shortfall is None:
        return None

    symbol = currency_symbol if currency_symbol is not None else settings.currency_symbol
    gap = math.ceil(shortfall)
    message = (
        f"Min order {format_whole_amount(discount.min_order_amount, symbol)} required. "
        f"Add {symbol}{gap} more."
    )
    return EligibilityResult.rejected(IneligibleReason.BELOW_MINIMUM, message, gap_amount=shortfall)


def applicable_subtotal(discount: Discount, context: OrderContext) -> Decimal:
    """步骤8：按商品或分类范围计算适用小计"""
    if discount.product_ids:
        scoped = set(discount.product_ids)
        return sum(
            (line.line_total for line in context.lines if line.product_id in scoped),
            Decimal("0")
        )

    categories = set(discount.scope_category_ids)
    if categories:
        return sum(
            (
                line.line_total
                for line in context.lines
                if context.category_of.get(line.product_id) in categories
            ),
            Decimal("0")
        )

    return context.subtotal


def compute_amount(discount: Discount, base: Decimal) -> Decimal:
    """步骤10：计算折扣金额，不超过计算基数"""
    if discount.type == DiscountType.PERCENTAGE:
        amount = round_money(base * discount.value / HUNDRED)
    else:
        amount = round_money(min(discount.value, base))
    return min(amount, round_money(base))


def evaluate(
    discount: Discount,
    context: OrderContext,
    now: datetime,
    currency_symbol: Optional[str] = None
) -> EligibilityResult:
    """评估单个折扣对当前订单是否可用"""
    rejection = check_window(discount, now)
    if rejection is None:
        rejection = check_gates(discount, context)
    if rejection is None:
        rejection = check_minimum(discount, context.subtotal, currency_symbol)
    if rejection is not None:
        return rejection

    base = applicable_subtotal(discount, context)
    if base <= 0:
        return EligibilityResult.rejected(IneligibleReason.NOT_APPLICABLE, MSG_NOT_APPLICABLE)

    return EligibilityResult.ok(compute_amount(discount, base))


def not_found() -> EligibilityResult:
    return EligibilityResult.rejected(IneligibleReason.NOT_FOUND, MSG_NOT_FOUND)
