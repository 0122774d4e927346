from decimal import Decimal

from storefront.domain.pricing import (
    PricedLine,
    applicable_lines,
    compute_total,
    coupon_discount,
    effective_unit_price,
    money,
    subtotal,
)


def line(price, qty, merchant, discount="0", product_id=1):
    return PricedLine(
        product_id=product_id,
        merchant_id=merchant,
        price=Decimal(price),
        discount=Decimal(discount),
        quantity=qty,
    )


def test_effective_price_is_not_rounded_until_presentation():
    unit = effective_unit_price(Decimal("29.99"), Decimal("10"))
    assert unit == Decimal("26.991")
    assert money(unit) == Decimal("26.99")


def test_subtotal_uses_effective_price():
    lines = [line("100", 2, 1, discount="25"), line("50", 1, 2)]
    assert subtotal(lines) == Decimal("200")


def test_coupon_discount_only_counts_coupon_merchant_items():
    lines = [line("100", 2, merchant=1, product_id=1), line("50", 1, merchant=2, product_id=2)]

    assert [l.product_id for l in applicable_lines(lines, 1)] == [1]
    assert money(coupon_discount(lines, 1, Decimal("10"))) == Decimal("20.00")


def test_coupon_discount_is_zero_without_matching_items():
    lines = [line("50", 1, merchant=2)]
    assert coupon_discount(lines, 1, 50) == Decimal("0")


def test_total_subtracts_discount():
    lines = [line("100", 2, 1), line("50", 1, 2)]
    assert compute_total(lines, Decimal("20")) == Decimal("230")
    assert compute_total(lines) == Decimal("250")


def test_total_is_never_negative():
    assert compute_total([line("10", 1, 1)], Decimal("15")) == Decimal("0")


def test_money_rounds_half_up():
    assert money(Decimal("0.005")) == Decimal("0.01")
    assert money(59.99 * 2) == Decimal("119.98")
