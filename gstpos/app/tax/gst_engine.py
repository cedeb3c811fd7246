from __future__ import annotations

"""GST calculation for restaurant bills.

Intrastate sales split the tax evenly into CGST and SGST, interstate sales
charge it wholly as IGST. Bills with line items at different rates are taxed
at a single weighted-average rate derived from the pre-discount line totals.
"""

from decimal import Decimal, localcontext
from typing import Iterable, Mapping, Union

from .models import BillResult, Jurisdiction, LineItem, TaxBreakdown
from .money import HUNDRED, MONEY_PREC, ZERO, non_negative, round2, round2_ratio

ItemLike = Union[LineItem, Mapping[str, object]]


def _as_line_items(items: Iterable[ItemLike]) -> list[LineItem]:
    return [
        item if isinstance(item, LineItem) else LineItem.from_mapping(item)
        for item in items
    ]


def _split_tax(
    numerator: Decimal, denominator: Decimal, jurisdiction: Jurisdiction
) -> TaxBreakdown:
    """Split the tax ``numerator / denominator`` without rounding it first."""

    if numerator == 0:
        return TaxBreakdown()
    total_tax = round2_ratio(numerator, denominator)
    if jurisdiction is Jurisdiction.SAME_STATE:
        half = round2_ratio(numerator, denominator * 2)
        return TaxBreakdown(cgst=half, sgst=half, igst=ZERO, total_tax=total_tax)
    return TaxBreakdown(cgst=ZERO, sgst=ZERO, igst=total_tax, total_tax=total_tax)


def compute_single_rate_tax(
    amount: object,
    tax_rate: object,
    jurisdiction: Jurisdiction | str,
) -> TaxBreakdown:
    """Return the tax split of ``amount`` at ``tax_rate`` percent.

    ``total_tax`` is rounded from the unsplit tax, so for odd-paisa taxes
    ``cgst + sgst`` can exceed ``total_tax`` by ₹0.01.

    >>> compute_single_rate_tax(1000, 9, "same-state")
    TaxBreakdown(cgst=Decimal('45.00'), sgst=Decimal('45.00'), igst=Decimal('0.00'), total_tax=Decimal('90.00'))
    """

    amount = non_negative(amount, "amount")
    tax_rate = non_negative(tax_rate, "tax_rate")
    jurisdiction = Jurisdiction(jurisdiction)

    if amount == 0 or tax_rate == 0:
        return TaxBreakdown()

    with localcontext() as ctx:
        ctx.prec = MONEY_PREC
        return _split_tax(amount * tax_rate, HUNDRED, jurisdiction)


def compute_component_tax(
    amount: object,
    cgst_rate: object = 0,
    sgst_rate: object = 0,
    igst_rate: object = 0,
) -> TaxBreakdown:
    """Tax ``amount`` at separately configured CGST, SGST and IGST rates.

    A positive ``igst_rate`` takes precedence and charges IGST only.
    Otherwise CGST and SGST are rounded independently, and ``total_tax`` is
    rounded from their unrounded sum.
    """

    amount = non_negative(amount, "amount")
    cgst_rate = non_negative(cgst_rate, "cgst_rate")
    sgst_rate = non_negative(sgst_rate, "sgst_rate")
    igst_rate = non_negative(igst_rate, "igst_rate")

    if amount == 0:
        return TaxBreakdown()

    with localcontext() as ctx:
        ctx.prec = MONEY_PREC
        if igst_rate > 0:
            igst = round2_ratio(amount * igst_rate, HUNDRED)
            return TaxBreakdown(cgst=ZERO, sgst=ZERO, igst=igst, total_tax=igst)
        return TaxBreakdown(
            cgst=round2_ratio(amount * cgst_rate, HUNDRED),
            sgst=round2_ratio(amount * sgst_rate, HUNDRED),
            igst=ZERO,
            total_tax=round2_ratio(amount * (cgst_rate + sgst_rate), HUNDRED),
        )


def weighted_tax_rate(items: Iterable[ItemLike]) -> Decimal:
    """Blend the line item rates by their share of the pre-discount subtotal.

    Used for display; :func:`compute_bill` keeps the ratio unrounded.
    """

    lines = _as_line_items(items)
    with localcontext() as ctx:
        ctx.prec = MONEY_PREC
        gross = sum((line.line_total for line in lines), Decimal("0"))
        if gross == 0:
            return Decimal("0")
        weighted = sum(
            (line.line_total * line.tax_rate for line in lines), Decimal("0")
        )
        return weighted / gross


def compute_bill(
    items: Iterable[ItemLike],
    jurisdiction: Jurisdiction | str,
    service_charge_rate: object = 0,
    discount: object = 0,
) -> BillResult:
    """Aggregate ``items`` into a bill.

    Parameters
    ----------
    items:
        :class:`LineItem` objects or mappings with ``price``, ``quantity`` and
        ``tax_rate`` (``qty``/``gst`` aliases and a ``taxes`` component list
        accepted).
    jurisdiction:
        :class:`Jurisdiction` or its string value.
    service_charge_rate:
        Percentage levied on the discounted amount.
    discount:
        Flat amount taken off the subtotal. The taxable amount never drops
        below zero.

    Examples
    --------
    >>> items = [
    ...     {"price": 100, "quantity": 2, "tax_rate": 9},
    ...     {"price": 200, "quantity": 1, "tax_rate": 18},
    ... ]
    >>> compute_bill(items, "same-state", service_charge_rate=5).final_amount
    Decimal('474.00')
    """

    lines = _as_line_items(items)
    jurisdiction = Jurisdiction(jurisdiction)
    service_charge_rate = non_negative(service_charge_rate, "service_charge_rate")
    discount = non_negative(discount, "discount")

    if not lines:
        return BillResult()

    with localcontext() as ctx:
        ctx.prec = MONEY_PREC
        gross = sum((line.line_total for line in lines), Decimal("0"))
        weighted = sum(
            (line.line_total * line.tax_rate for line in lines), Decimal("0")
        )
        subtotal = round2(gross)
        taxable_amount = round2(max(Decimal("0"), subtotal - discount))
        service_charge = round2(taxable_amount * service_charge_rate / HUNDRED)

        # taxable * (weighted / gross) / 100, divided once at the end
        if gross == 0:
            tax = TaxBreakdown()
        else:
            tax = _split_tax(taxable_amount * weighted, gross * HUNDRED, jurisdiction)

        final_amount = round2(taxable_amount + service_charge + tax.total_tax)

    return BillResult(
        subtotal=subtotal,
        discount=round2(discount),
        taxable_amount=taxable_amount,
        cgst=tax.cgst,
        sgst=tax.sgst,
        igst=tax.igst,
        total_tax=tax.total_tax,
        service_charge=service_charge,
        final_amount=final_amount,
    )
