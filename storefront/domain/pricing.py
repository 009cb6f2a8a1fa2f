# storefront/domain/pricing.py
"""
Arytmetyka cen - jedyne miejsce w systemie, gdzie liczymy subtotal,
rabat, podatek, wysyłkę i total.

Wszystkie kwoty są ``Decimal`` zaokrąglane do centów (ROUND_HALF_UP).
Podatek zaokrąglany jest raz, a total to suma już zaokrąglonych składników.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from storefront.utils.settings import TAX_RATE, FREE_SHIPPING_THRESHOLD, FLAT_SHIPPING_FEE

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

PERCENTAGE = "percentage"
FIXED = "fixed"


def to_money(value) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def cart_subtotal(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Suma price * quantity po liniach koszyka."""
    return to_money(sum((to_money(price) * quantity for price, quantity in lines), ZERO))


def coupon_discount(coupon_type: str, amount, subtotal) -> Decimal:
    """
    percentage: round(subtotal * amount / 100, 2)
    fixed:      min(amount, subtotal)

    Wynik zawsze w przedziale [0, subtotal].
    """
    subtotal = to_money(subtotal)
    amount = Decimal(str(amount))

    if coupon_type == PERCENTAGE:
        discount = to_money(subtotal * amount / Decimal(100))
    elif coupon_type == FIXED:
        discount = min(to_money(amount), subtotal)
    else:
        raise ValueError(f"Unknown coupon type: {coupon_type}")

    return max(ZERO, min(discount, subtotal))


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


def shipping_for(
    subtotal,
    free_shipping_threshold: Decimal = FREE_SHIPPING_THRESHOLD,
    flat_shipping_fee: Decimal = FLAT_SHIPPING_FEE,
) -> Decimal:
    if to_money(subtotal) >= free_shipping_threshold:
        return ZERO
    return to_money(flat_shipping_fee)


def order_totals(
    subtotal,
    discount=ZERO,
    *,
    tax_rate: Decimal = TAX_RATE,
    free_shipping_threshold: Decimal = FREE_SHIPPING_THRESHOLD,
    flat_shipping_fee: Decimal = FLAT_SHIPPING_FEE,
) -> OrderTotals:
    subtotal = to_money(subtotal)
    discount = min(to_money(discount), subtotal)
    if discount < ZERO:
        raise ValueError("Discount cannot be negative")

    # podatek i wysyłka od subtotalu przed rabatem
    tax = to_money(subtotal * tax_rate)
    shipping = shipping_for(subtotal, free_shipping_threshold, flat_shipping_fee)
    total = subtotal - discount + tax + shipping

    return OrderTotals(
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        shipping=shipping,
        total=to_money(total),
    )
