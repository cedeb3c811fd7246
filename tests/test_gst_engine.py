import sys
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from gstpos.app.tax import (  # noqa: E402
    BillResult,
    InvalidAmountError,
    Jurisdiction,
    LineItem,
    MAX_AMOUNT,
    TaxBreakdown,
    combined_tax_rate,
    compute_bill,
    compute_component_tax,
    compute_single_rate_tax,
    weighted_tax_rate,
)

SAME = Jurisdiction.SAME_STATE
OTHER = Jurisdiction.DIFFERENT_STATE


def test_same_state_splits_cgst_and_sgst():
    result = compute_single_rate_tax(1000, 9, SAME)
    assert result == TaxBreakdown(
        cgst=Decimal("45"), sgst=Decimal("45"), igst=Decimal("0"), total_tax=Decimal("90")
    )


def test_different_state_charges_igst():
    result = compute_single_rate_tax(1000, 9, OTHER)
    assert result.as_dict() == {"cgst": 0.0, "sgst": 0.0, "igst": 90.0, "total_tax": 90.0}


@pytest.mark.parametrize("amount, rate", [(0, 9), (1000, 0), ("0.00", "0")])
def test_zero_amount_or_rate_is_all_zero(amount, rate):
    result = compute_single_rate_tax(amount, rate, SAME)
    assert result == TaxBreakdown()
    assert all(not v.is_signed() for v in (result.cgst, result.sgst, result.igst))


def test_decimal_amount_rounds_to_paise():
    result = compute_single_rate_tax(1234.56, 9, "same-state")
    assert result.cgst == Decimal("55.56")
    assert result.sgst == Decimal("55.56")
    assert result.total_tax == Decimal("111.11")


def test_total_tax_is_rounded_before_split():
    # 9% of ₹1 is 9 paise; each half of 4.5 paise rounds up
    result = compute_single_rate_tax(1, 9, SAME)
    assert result.cgst == result.sgst == Decimal("0.05")
    assert result.total_tax == Decimal("0.09")


def test_rounding_is_half_up():
    assert compute_single_rate_tax("0.5", 1, OTHER).igst == Decimal("0.01")
    assert compute_single_rate_tax("1.5", 1, OTHER).igst == Decimal("0.02")


def test_negative_input_rejected():
    with pytest.raises(InvalidAmountError) as excinfo:
        compute_single_rate_tax(-10, 5, SAME)
    assert excinfo.value.field == "amount"
    with pytest.raises(InvalidAmountError):
        compute_single_rate_tax(10, -5, SAME)


def test_unknown_jurisdiction_rejected():
    with pytest.raises(ValueError):
        compute_single_rate_tax(100, 5, "overseas")


def test_complete_bill_with_service_charge():
    items = [
        {"price": 100, "quantity": 2, "tax_rate": 9},
        {"price": 200, "quantity": 1, "tax_rate": 18},
    ]
    result = compute_bill(items, SAME, service_charge_rate=5)
    assert result.subtotal == 400
    assert result.taxable_amount == 400
    assert result.service_charge == 20
    assert result.cgst == result.sgst == Decimal("27.00")
    assert result.igst == 0
    assert result.total_tax == Decimal("54.00")
    assert result.final_amount == Decimal("474.00")


def test_interstate_bill():
    result = compute_bill([LineItem.create(100, 1, 18)], OTHER)
    assert result.cgst == result.sgst == 0
    assert result.igst == 18
    assert result.total_tax == 18
    assert result.final_amount == 118


def test_discount_reduces_taxable_amount():
    result = compute_bill([{"price": 100, "quantity": 1, "tax_rate": 9}], SAME, 0, 10)
    assert result.subtotal == 100
    assert result.discount == 10
    assert result.taxable_amount == 90
    assert result.cgst == result.sgst == Decimal("4.05")
    assert result.final_amount == Decimal("98.10")


def test_discount_larger_than_subtotal_clamps_to_zero():
    result = compute_bill([{"price": 100, "quantity": 1, "tax_rate": 9}], SAME, 5, 150)
    assert result.discount == 150
    assert result.taxable_amount == 0
    assert result.service_charge == 0
    assert result.total_tax == 0
    assert result.final_amount == 0


def test_service_charge_uses_discounted_amount():
    result = compute_bill([{"price": 200, "quantity": 1, "tax_rate": 0}], SAME, 10, 50)
    assert result.service_charge == 15
    assert result.final_amount == 165


def test_mixed_rates_use_weighted_average():
    items = [
        {"price": 100, "quantity": 1, "tax_rate": 5},
        {"price": 100, "quantity": 1, "tax_rate": 18},
    ]
    assert weighted_tax_rate(items) == Decimal("11.5")
    result = compute_bill(items, SAME)
    assert result.subtotal == 200
    assert result.cgst == result.sgst == Decimal("11.50")
    assert result.total_tax == 23


def test_weighted_rate_ignores_discount():
    items = [
        {"price": 100, "quantity": 2, "tax_rate": 9},
        {"price": 200, "quantity": 1, "tax_rate": 18},
    ]
    result = compute_bill(items, OTHER, discount=100)
    # 13.5% of the discounted ₹300
    assert result.igst == Decimal("40.50")


def test_empty_bill_is_all_zero():
    result = compute_bill([], SAME, 0, 0)
    assert result == BillResult()
    assert set(result.as_dict().values()) == {0.0}


def test_empty_bill_ignores_discount_and_service_charge():
    assert compute_bill([], SAME, service_charge_rate=10, discount=50) == BillResult()
    assert compute_bill([], OTHER, service_charge_rate=10, discount=50) == BillResult()


def test_zero_quantity_lines_produce_zero_bill():
    result = compute_bill([{"price": 100, "quantity": 0, "tax_rate": 5}], SAME, 10)
    assert weighted_tax_rate([{"price": 100, "quantity": 0, "tax_rate": 5}]) == 0
    assert result.final_amount == 0


def test_qty_and_gst_aliases():
    items = [{"price": 50, "qty": 2, "gst": 12}]
    assert compute_bill(items, OTHER).igst == 12


def test_single_item_matches_single_rate_tax():
    item = LineItem.create("249.99", 3, 12)
    bill = compute_bill([item], SAME)
    tax = compute_single_rate_tax(item.line_total, item.tax_rate, SAME)
    assert (bill.cgst, bill.sgst, bill.igst, bill.total_tax) == (
        tax.cgst,
        tax.sgst,
        tax.igst,
        tax.total_tax,
    )
    assert bill.final_amount == bill.taxable_amount + tax.total_tax


@pytest.mark.parametrize("jurisdiction", [SAME, OTHER])
def test_bill_invariants(jurisdiction):
    items = [
        {"price": "199.99", "quantity": 3, "tax_rate": 5},
        {"price": "349.50", "quantity": 1, "tax_rate": 18},
        {"price": "12.25", "quantity": 7, "tax_rate": 12},
    ]
    result = compute_bill(items, jurisdiction, service_charge_rate="7.5", discount="33.33")
    assert result.taxable_amount == max(Decimal("0"), result.subtotal - result.discount)
    assert result.final_amount == (
        result.taxable_amount + result.service_charge + result.total_tax
    )
    if jurisdiction is SAME:
        assert result.igst == 0
        assert abs(result.cgst + result.sgst - result.total_tax) <= Decimal("0.01")
    else:
        assert result.cgst == result.sgst == 0
        assert result.igst == result.total_tax
    assert all(v >= 0 for v in result.as_dict().values())


def test_increasing_quantity_never_lowers_totals():
    previous = None
    for qty in range(0, 6):
        items = [
            {"price": 120, "quantity": qty, "tax_rate": 5},
            {"price": 80, "quantity": 1, "tax_rate": 18},
        ]
        result = compute_bill(items, SAME, service_charge_rate=10, discount=25)
        if previous is not None:
            assert result.subtotal >= previous.subtotal
            assert result.taxable_amount >= previous.taxable_amount
            assert result.final_amount >= previous.final_amount
        previous = result


def test_line_item_validation():
    with pytest.raises(InvalidAmountError):
        LineItem.create(-1, 1, 5)
    with pytest.raises(InvalidAmountError):
        LineItem.create(10, "1.5", 5)
    with pytest.raises(InvalidAmountError):
        LineItem.from_mapping({"price": 10, "quantity": 1, "tax_rate": -5})


def test_negative_discount_rejected():
    with pytest.raises(InvalidAmountError) as excinfo:
        compute_bill([{"price": 10}], SAME, discount=-1)
    assert excinfo.value.field == "discount"


def test_concurrent_calls_are_independent():
    items = [{"price": 100, "quantity": 2, "tax_rate": 9}, {"price": 200, "quantity": 1, "tax_rate": 18}]
    expected = compute_bill(items, SAME, 5)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: compute_bill(items, SAME, 5), range(50)))
    assert all(r == expected for r in results)


@pytest.mark.parametrize(
    "jurisdiction, cgst, igst",
    [(OTHER, Decimal("0.00"), Decimal("10.00")), (SAME, Decimal("5.00"), Decimal("0.00"))],
)
def test_weighted_tax_rounds_once_on_half_paisa(jurisdiction, cgst, igst):
    # 1% of 1000 over a 3000 subtotal: 2998.50 * 1/3 % = 9.995 exactly
    items = [
        {"price": 1000, "quantity": 1, "tax_rate": 1},
        {"price": 2000, "quantity": 1, "tax_rate": 0},
    ]
    result = compute_bill(items, jurisdiction, discount="1.50")
    assert result.taxable_amount == Decimal("2998.50")
    assert result.total_tax == Decimal("10.00")
    assert result.cgst == result.sgst == cgst
    assert result.igst == igst
    assert result.final_amount == Decimal("3008.50")


def test_oversized_amount_rejected():
    with pytest.raises(InvalidAmountError) as excinfo:
        compute_single_rate_tax(Decimal("1e27"), 18, SAME)
    assert excinfo.value.field == "amount"
    assert "maximum" in excinfo.value.hint
    with pytest.raises(InvalidAmountError):
        compute_bill([{"price": "1e13", "quantity": 1, "tax_rate": 5}], SAME)


def test_largest_amounts_are_exact():
    assert compute_single_rate_tax(MAX_AMOUNT, 18, OTHER).igst == Decimal("180000000000.00")
    result = compute_bill(
        [{"price": MAX_AMOUNT, "quantity": 1_000_000, "tax_rate": 18}],
        SAME,
        service_charge_rate=10,
    )
    assert result.subtotal == Decimal("1000000000000000000.00")
    assert result.cgst == Decimal("90000000000000000.00")
    assert result.final_amount == Decimal("1280000000000000000.00")


def test_component_rates_intrastate():
    assert compute_component_tax(1000, 9, 9) == TaxBreakdown(
        cgst=Decimal("90.00"),
        sgst=Decimal("90.00"),
        igst=Decimal("0.00"),
        total_tax=Decimal("180.00"),
    )
    # each component rounds on its own, the total from the unrounded sum
    odd = compute_component_tax("10.05", "2.5", "2.5")
    assert (odd.cgst, odd.sgst, odd.total_tax) == (
        Decimal("0.25"),
        Decimal("0.25"),
        Decimal("0.50"),
    )


def test_component_igst_takes_precedence():
    result = compute_component_tax(1000, cgst_rate=9, sgst_rate=9, igst_rate=12)
    assert result == TaxBreakdown(igst=Decimal("120.00"), total_tax=Decimal("120.00"))


def test_component_zero_amount_and_validation():
    assert compute_component_tax(0, 9, 9) == TaxBreakdown()
    with pytest.raises(InvalidAmountError) as excinfo:
        compute_component_tax(100, sgst_rate=-1)
    assert excinfo.value.field == "sgst_rate"


def test_combined_tax_rate_from_components():
    assert combined_tax_rate(
        [{"tax_type": "CGST", "tax_rate": 9}, {"tax_type": "SGST", "tax_rate": 9}]
    ) == 18
    assert combined_tax_rate([{"taxType": "igst", "taxRate": "12"}]) == 12
    assert combined_tax_rate([]) == 0
    with pytest.raises(InvalidAmountError) as excinfo:
        combined_tax_rate([{"tax_type": "VAT", "tax_rate": 5}])
    assert excinfo.value.field == "taxes"


def test_taxes_list_sets_line_rate():
    line = LineItem.from_mapping(
        {
            "price": 100,
            "taxes": [
                {"tax_type": "CGST", "tax_rate": "2.5"},
                {"tax_type": "SGST", "tax_rate": "2.5"},
            ],
        }
    )
    assert line.tax_rate == 5
    assert compute_bill([line], SAME).total_tax == Decimal("5.00")
