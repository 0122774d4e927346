# storefront/domain/pricing.py
"""
Arytmetyka cen dla koszyka, kuponow i transakcji.

Wszystko liczone na Decimal bez zaokraglen, zaokraglenie do groszy
tylko przy prezentacji (money) i przy zapisie kwot transakcji.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    merchant_id: int
    price: Decimal
    discount: Decimal
    quantity: int

    @property
    def unit_price(self) -> Decimal:
        return effective_unit_price(self.price, self.discount)

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value if value is not None else 0))


def money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def effective_unit_price(price, discount) -> Decimal:
    """price * (1 - discount/100)"""
    return to_decimal(price) * (1 - to_decimal(discount) / HUNDRED)


def subtotal(lines: Iterable[PricedLine]) -> Decimal:
    return sum((line.total for line in lines), Decimal("0"))


def applicable_lines(lines: Iterable[PricedLine], merchant_id: int) -> list[PricedLine]:
    return [line for line in lines if line.merchant_id == merchant_id]


def coupon_discount(lines: Iterable[PricedLine], merchant_id: int, percentage) -> Decimal:
    """Rabat liczony tylko od pozycji sprzedawcy, ktory wystawil kupon."""
    base = subtotal(applicable_lines(lines, merchant_id))
    return base * to_decimal(percentage) / HUNDRED


def compute_total(lines: Iterable[PricedLine], discount_amount=None) -> Decimal:
    total = subtotal(lines) - to_decimal(discount_amount or 0)
    return max(total, Decimal("0"))
