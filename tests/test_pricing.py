from decimal import Decimal

import pytest

from storefront.domain import pricing


D = Decimal


def test_cart_subtotal_sums_price_times_quantity():
    lines = [(D("19.99"), 3), (D("5.50"), 2)]
    assert pricing.cart_subtotal(lines) == D("70.97")


def test_cart_subtotal_of_empty_cart_is_zero():
    assert pricing.cart_subtotal([]) == D("0.00")


def test_percentage_discount_rounds_half_up():
    # 33.33 * 15% = 4.9995
    assert pricing.coupon_discount("percentage", D("15"), D("33.33")) == D("5.00")


def test_percentage_discount():
    assert pricing.coupon_discount("percentage", D("10"), D("120.00")) == D("12.00")


def test_fixed_discount_below_subtotal():
    assert pricing.coupon_discount("fixed", D("20"), D("120.00")) == D("20.00")


def test_fixed_discount_capped_at_subtotal():
    assert pricing.coupon_discount("fixed", D("50"), D("30.00")) == D("30.00")


@pytest.mark.parametrize(
    "coupon_type,amount,subtotal",
    [
        ("percentage", "100", "45.10"),
        ("percentage", "0.5", "0.01"),
        ("fixed", "0.01", "0.00"),
        ("fixed", "999", "12.34"),
    ],
)
def test_discount_stays_between_zero_and_subtotal(coupon_type, amount, subtotal):
    discount = pricing.coupon_discount(coupon_type, D(amount), D(subtotal))
    assert D("0") <= discount <= D(subtotal)


def test_unknown_coupon_type_raises():
    with pytest.raises(ValueError):
        pricing.coupon_discount("bogo", D("1"), D("10"))


@pytest.mark.parametrize(
    "subtotal,expected",
    [
        ("80.00", "9.99"),
        ("99.99", "9.99"),
        ("100.00", "0.00"),
        ("250.00", "0.00"),
    ],
)
def test_shipping_is_free_from_threshold(subtotal, expected):
    assert pricing.shipping_for(D(subtotal)) == D(expected)


def test_order_totals_with_fixed_coupon():
    totals = pricing.order_totals(D("120.00"), D("20.00"))

    assert totals.subtotal == D("120.00")
    assert totals.discount == D("20.00")
    assert totals.tax == D("9.60")
    assert totals.shipping == D("0.00")
    assert totals.total == D("109.60")


def test_order_totals_below_free_shipping():
    totals = pricing.order_totals(D("80.00"))

    assert totals.tax == D("6.40")
    assert totals.shipping == D("9.99")
    assert totals.total == D("96.39")


def test_tax_and_shipping_use_subtotal_before_discount():
    # po rabacie 90 < 100, ale wysyłka liczona od 110
    totals = pricing.order_totals(D("110.00"), D("20.00"))

    assert totals.shipping == D("0.00")
    assert totals.tax == D("8.80")
    assert totals.total == D("98.80")


def test_discount_larger_than_subtotal_is_clamped():
    totals = pricing.order_totals(D("10.00"), D("25.00"))

    assert totals.discount == D("10.00")
    assert totals.total == totals.tax + totals.shipping


def test_total_is_sum_of_rounded_parts():
    totals = pricing.order_totals(D("33.33"), D("5.00"))

    assert totals.total == totals.subtotal - totals.discount + totals.tax + totals.shipping


def test_negative_discount_rejected():
    with pytest.raises(ValueError):
        pricing.order_totals(D("10.00"), D("-1.00"))


def test_custom_rates():
    totals = pricing.order_totals(
        D("50.00"),
        tax_rate=D("0.20"),
        free_shipping_threshold=D("40"),
        flat_shipping_fee=D("4.99"),
    )

    assert totals.tax == D("10.00")
    assert totals.shipping == D("0.00")
    assert totals.total == D("60.00")


def test_to_money_accepts_floats_and_strings():
    assert pricing.to_money(19.995) == D("20.00")
    assert pricing.to_money("2.345") == D("2.35")
