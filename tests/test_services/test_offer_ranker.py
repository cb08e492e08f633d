"""
可用优惠列表构建测试
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from app.models.discount import DiscountType
from app.services.offer_ranker import OfferRanker


class TestOfferRanker:
    """OfferRanker测试类"""

    @pytest.fixture
    def ranker(self):
        return OfferRanker(currency_symbol="₹")

    def test_locked_offer_below_minimum(self, ranker, make_discount, make_context, now):
        """未达门槛的折扣标记为待解锁，按最低金额预估可省金额"""
        discount = make_discount(code="BIG10", min_order_amount=Decimal("1000"))
        offers = ranker.rank([discount], make_context(subtotal=500), now)

        assert len(offers) == 1
        offer = offers[0]
        assert offer.locked is True
        assert offer.discount_amount == Decimal("100.00")
        assert offer.gap_amount == Decimal("500")
        assert offer.description == "10% off on orders over ₹1000"

    def test_locked_fixed_offer_capped_at_minimum(self, ranker, make_discount, make_context, now):
        discount = make_discount(type="fixed", value=Decimal("300"), min_order_amount=Decimal("200"))
        offer = ranker.rank([discount], make_context(subtotal=50), now)[0]

        assert offer.locked is True
        assert offer.discount_amount == Decimal("200.00")
        assert offer.gap_amount == Decimal("150")

    def test_unlocked_offer(self, ranker, make_discount, make_context, now):
        discount = make_discount(min_order_amount=Decimal("100"))
        offer = ranker.rank([discount], make_context(subtotal=250), now)[0]

        assert offer.locked is False
        assert offer.gap_amount is None
        assert offer.discount_amount == Decimal("25.00")
        assert offer.code == "SAVE10"
        assert offer.type == DiscountType.PERCENTAGE

    def test_custom_description_preferred(self, ranker, make_discount, make_context, now):
        discount = make_discount(description="Summer sale", min_order_amount=Decimal("100"))
        offer = ranker.rank([discount], make_context(subtotal=250), now)[0]

        assert offer.description == "Summer sale"

    def test_fixed_description_without_minimum(self, ranker, make_discount, make_context, now):
        discount = make_discount(type="fixed", value=Decimal("50.00"))
        offer = ranker.rank([discount], make_context(subtotal=250), now)[0]

        assert offer.description == "₹50 off"

    def test_uses_left(self, ranker, make_discount, make_context, now):
        limited = make_discount(code="LIMITED", max_usage=10, used_count=7)
        unlimited = make_discount(code="OPEN")

        offers = ranker.rank([limited, unlimited], make_context(subtotal=100), now)

        assert offers[0].uses_left == 3
        assert offers[1].uses_left is None

    def test_excludes_unusable_discounts(self, ranker, make_discount, make_context, now):
        """次数用尽、过期、首单和推荐码限制不满足的折扣都不出现"""
        candidates = [
            make_discount(code="USEDUP", max_usage=5, used_count=5),
            make_discount(code="OLD", expires_at=now - timedelta(minutes=1)),
            make_discount(code="FIRST", first_order_only=True),
            make_discount(code="REF", referral_code="FRIEND"),
            make_discount(code="SCOPED", product_ids=["P9"]),
            make_discount(code="OK"),
        ]
        context = make_context(lines=[("P1", 1, 100)])

        offers = ranker.rank(candidates, context, now)

        assert [offer.code for offer in offers] == ["OK"]

    def test_first_order_offer_for_new_customer(self, ranker, make_discount, make_context, now):
        discount = make_discount(code="WELCOME", first_order_only=True)
        context = make_context(subtotal=100, customer_email="new@example.com", has_prior_order=False)

        offers = ranker.rank([discount], context, now)

        assert [offer.code for offer in offers] == ["WELCOME"]

    def test_preserves_catalog_order(self, ranker, make_discount, make_context, now):
        candidates = [
            make_discount(code="B", value=Decimal("5"), created_at=datetime(2024, 1, 1)),
            make_discount(code="A", value=Decimal("20"), created_at=datetime(2024, 2, 1)),
        ]

        offers = ranker.rank(candidates, make_context(subtotal=100), now)

        assert [offer.code for offer in offers] == ["B", "A"]

    def test_empty_candidates(self, ranker, make_context, now):
        assert ranker.rank([], make_context(subtotal=100), now) == []
