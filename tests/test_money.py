import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from gstpos.app.tax.money import (  # noqa: E402
    MAX_AMOUNT,
    InvalidAmountError,
    non_negative,
    non_negative_int,
    round2,
    round2_ratio,
    to_decimal,
)


def test_round2_half_up():
    assert round2(Decimal("4.045")) == Decimal("4.05")
    assert round2(Decimal("4.044")) == Decimal("4.04")
    assert str(round2(Decimal("7"))) == "7.00"
    # wider than the default 28 digit context
    big = Decimal("1000000000000000000000000000000.005")
    assert round2(big) == Decimal("1000000000000000000000000000000.01")


def test_round2_ratio_rounds_exact_quotient():
    # 29985 / 3000 = 9.995, 1 / 3 = 0.333...
    assert round2_ratio(Decimal("29985"), Decimal("3000")) == Decimal("10.00")
    assert round2_ratio(Decimal("1"), Decimal("3")) == Decimal("0.33")
    assert round2_ratio(Decimal("2"), Decimal("3")) == Decimal("0.67")
    assert str(round2_ratio(Decimal("0"), Decimal("7"))) == "0.00"


def test_float_conversion_avoids_binary_noise():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(Decimal("1.10")) == Decimal("1.10")


@pytest.mark.parametrize("value", [-1, "-0.01", "abc", None, float("inf"), "NaN", True])
def test_non_negative_rejects(value):
    with pytest.raises(InvalidAmountError) as excinfo:
        non_negative(value, "price")
    assert excinfo.value.code == "INVALID_AMOUNT"
    assert excinfo.value.field == "price"


def test_non_negative_int():
    assert non_negative_int("3") == 3
    assert non_negative_int(Decimal("2.0")) == 2
    with pytest.raises(InvalidAmountError) as excinfo:
        non_negative_int(2.5)
    assert "whole number" in str(excinfo.value)


def test_non_negative_ceiling():
    assert non_negative(MAX_AMOUNT) == MAX_AMOUNT
    with pytest.raises(InvalidAmountError) as excinfo:
        non_negative("1e27", "price")
    assert excinfo.value.hint == "maximum is 1000000000000"
