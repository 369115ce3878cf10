from decimal import Decimal

import pytest

from boutique.payments.amounts import to_minor_units


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("20.00"), 2000),
        (Decimal("0.01"), 1),
        (Decimal("10.005"), 1001),
        (Decimal("10.004"), 1000),
        (Decimal("14.97"), 1497),
        (Decimal("0"), 0),
    ],
)
def test_to_minor_units_rounds_half_up(amount, expected):
    assert to_minor_units(amount, "eur") == expected


def test_float_input_goes_through_str():
    # 0.1 + 0.2 en float donne 0.30000000000000004
    assert to_minor_units(0.1 + 0.2) == 30


def test_zero_decimal_currency_is_not_scaled():
    assert to_minor_units(Decimal("500"), "JPY") == 500


def test_negative_amount_is_refused():
    with pytest.raises(ValueError):
        to_minor_units(Decimal("-1.00"))
