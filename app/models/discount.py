"""
折扣相关数据模型
"""

from decimal import Decimal
from datetime import datetime
from typing import Annotated, List, Optional, Dict
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel
from enum import Enum

from app.core.clock import to_naive_utc


# 金额统一使用Decimal计算，JSON输出为数字
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class DiscountType(str, Enum):
    """折扣类型枚举"""
    PERCENTAGE = "percentage"  # 百分比折扣
    FIXED = "fixed"  # 固定金额折扣


class DiscountStatus(str, Enum):
    """折扣状态枚举（缓存字段，仅供展示）"""
    ACTIVE = "active"
    DISABLED = "disabled"
    SCHEDULED = "scheduled"


class IneligibleReason(str, Enum):
    """不可用原因"""
    NOT_FOUND = "not_found"
    DISABLED = "disabled"
    NOT_YET_ACTIVE = "not_yet_active"
    EXPIRED = "expired"
    USAGE_EXHAUSTED = "usage_exhausted"
    NOT_FIRST_ORDER = "not_first_order"
    REFERRAL_REQUIRED = "referral_required"
    BELOW_MINIMUM = "below_minimum"
    NOT_APPLICABLE = "not_applicable"


class Discount(BaseModel):
    """折扣基础模型"""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="折扣ID")
    code: str = Field(..., min_length=1, max_length=50, description="折扣代码")
    type: DiscountType = Field(..., description="折扣类型")
    value: Decimal = Field(..., ge=0, description="折扣值，百分比按0-100计")
    description: Optional[str] = Field(None, description="展示文案")
    allow_auto_apply: bool = Field(default=True, description="是否允许自动应用")
    product_ids: List[str] = Field(default_factory=list, description="适用商品ID")
    category_ids: List[str] = Field(default_factory=list, description="适用分类ID")
    min_order_amount: Optional[Decimal] = Field(None, ge=0, description="最低订单金额")
    max_usage: Optional[int] = Field(None, ge=0, description="总使用次数上限")
    used_count: int = Field(default=0, ge=0, description="已使用次数")
    starts_at: Optional[datetime] = Field(None, description="生效时间")
    expires_at: Optional[datetime] = Field(None, description="过期时间")
    status: DiscountStatus = Field(default=DiscountStatus.ACTIVE, description="缓存状态")
    first_order_only: bool = Field(default=False, description="仅限首单")
    referral_code: Optional[str] = Field(None, description="绑定的推荐码")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("product_ids", "category_ids", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    @field_validator("used_count", mode="before")
    @classmethod
    def none_as_zero(cls, v):
        return v or 0

    @field_validator("starts_at", "expires_at", "created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, v):
        return to_naive_utc(v)

    @property
    def normalized_code(self) -> str:
        return self.code.strip().upper()

    @property
    def scope_category_ids(self) -> List[str]:
        # 同时配置时以商品范围为准
        if self.product_ids:
            return []
        return self.category_ids or []

    @property
    def is_whole_order(self) -> bool:
        return not self.product_ids and not self.category_ids


class CartLine(BaseModel):
    """购物车行"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderContext(BaseModel):
    """订单上下文 - 评估所需的全部输入"""

    subtotal: Decimal = Field(..., ge=0)
    lines: List[CartLine] = Field(default_factory=list)
    customer_email: Optional[str] = None
    customer_referral_code: Optional[str] = None
    category_of: Dict[str, Optional[str]] = Field(default_factory=dict, description="商品ID到分类ID的映射")
    has_prior_order: Optional[bool] = Field(None, description="该邮箱是否已有订单，None表示未查询")


class EligibilityResult(BaseModel):
    """折扣评估结果"""

    eligible: bool
    discount_amount: Decimal = Decimal("0")
    reason: Optional[IneligibleReason] = None
    message: Optional[str] = None
    gap_amount: Optional[Decimal] = None

    @classmethod
    def ok(cls, discount_amount: Decimal) -> "EligibilityResult":
        return cls(eligible=True, discount_amount=discount_amount)

    @classmethod
    def rejected(
        cls,
        reason: IneligibleReason,
        message: str,
        gap_amount: Optional[Decimal] = None
    ) -> "EligibilityResult":
        return cls(eligible=False, reason=reason, message=message, gap_amount=gap_amount)


class CamelModel(BaseModel):
    """对外接口模型基类，字段使用camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Offer(CamelModel):
    """可用优惠展示项"""

    code: str
    type: DiscountType
    value: Money
    min_order_amount: Optional[Money] = None
    discount_amount: Money
    description: str
    allow_auto_apply: bool = True
    created_at: Optional[datetime] = None
    locked: bool = False
    gap_amount: Optional[Money] = None
    expires_at: Optional[datetime] = None
    uses_left: Optional[int] = None


class ProductOffer(CamelModel):
    """商品列表角标"""

    code: str
    value: Money
    type: DiscountType
    description: str


class FeaturedOffer(CamelModel):
    """首页推荐优惠"""

    code: str
    description: str


class AutoApplyStrategy(str, Enum):
    """自动应用策略"""
    BEST_SAVINGS = "best_savings"
    FIRST_CREATED = "first_created"
    HIGHEST_PERCENTAGE = "highest_percentage"
    CUSTOMER_CHOICE = "customer_choice"


class CouponSettings(CamelModel):
    """店铺优惠券行为设置"""

    auto_apply: bool = False
    auto_apply_strategy: AutoApplyStrategy = AutoApplyStrategy.BEST_SAVINGS
    show_toast_on_apply: bool = True


class ValidationResult(CamelModel):
    """优惠码校验结果"""

    valid: bool
    discount_amount: Optional[Money] = None
    message: str
    reason: Optional[IneligibleReason] = None
