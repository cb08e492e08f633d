"""
折扣展示文案测试
"""

from decimal import Decimal

from app.models.discount import DiscountType
from app.services.discount_text import describe_discount, describe_value, format_number, format_whole_amount


class TestDiscountText:
    """展示文案测试类"""

    def test_format_number(self):
        assert format_number(Decimal("10.00")) == "10"
        assert format_number(Decimal("12.50")) == "12.5"

    def test_format_whole_amount_rounds_half_up(self):
        assert format_whole_amount(Decimal("999.50"), "₹") == "₹1000"
        assert format_whole_amount(Decimal("999.49"), "$") == "$999"

    def test_describe_value(self):
        assert describe_value(DiscountType.PERCENTAGE, Decimal("12.5"), "₹") == "12.5% off"
        assert describe_value(DiscountType.FIXED, Decimal("50"), "₹") == "₹50 off"

    def test_describe_discount_with_minimum(self, make_discount):
        discount = make_discount(type="fixed", value=Decimal("100"), min_order_amount=Decimal("999"))

        assert describe_discount(discount, "₹") == "₹100 off"
        assert describe_discount(discount, "₹", include_minimum=True) == "₹100 off on orders over ₹999"

    def test_zero_minimum_not_mentioned(self, make_discount):
        discount = make_discount(min_order_amount=Decimal("0"))

        assert describe_discount(discount, "₹", include_minimum=True) == "10% off"

    def test_custom_description_wins(self, make_discount):
        discount = make_discount(description="  Festive offer  ", min_order_amount=Decimal("500"))

        assert describe_discount(discount, "₹", include_minimum=True) == "Festive offer"
