"""Value records exchanged with the GST engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping

from .money import ZERO, InvalidAmountError, non_negative, non_negative_int

TAX_TYPES = ("CGST", "SGST", "IGST")


class Jurisdiction(str, Enum):
    """Whether a sale is intrastate (CGST + SGST) or interstate (IGST)."""

    SAME_STATE = "same-state"
    DIFFERENT_STATE = "different-state"


@dataclass(frozen=True)
class LineItem:
    """One ordered menu item at its snapshot price and GST rate (percent).

    Use :meth:`create` or :meth:`from_mapping` rather than the constructor so
    that negative or fractional values are rejected up front.
    """

    unit_price: Decimal
    quantity: int
    tax_rate: Decimal

    @classmethod
    def create(cls, unit_price: object, quantity: object, tax_rate: object = 0) -> "LineItem":
        return cls(
            unit_price=non_negative(unit_price, "unit_price"),
            quantity=non_negative_int(quantity, "quantity"),
            tax_rate=non_negative(tax_rate, "tax_rate"),
        )

    @classmethod
    def from_mapping(cls, item: Mapping[str, object]) -> "LineItem":
        """Build from order payloads using ``price``/``qty``/``gst`` keys.

        ``quantity`` and ``tax_rate`` are accepted as aliases; quantity
        defaults to ``1`` and the rate to ``0``. A menu item's ``taxes`` list
        is folded into the rate with :func:`combined_tax_rate`.
        """

        price = item["unit_price"] if "unit_price" in item else item["price"]
        qty = item.get("quantity", item.get("qty", 1))
        if item.get("taxes"):
            rate = combined_tax_rate(item["taxes"])
        else:
            rate = item.get("tax_rate", item.get("gst", 0))
        return cls.create(price, qty, rate)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


def combined_tax_rate(taxes: Iterable[Mapping[str, object]]) -> Decimal:
    """Fold per-type tax components into one GST rate.

    Components look like ``{"tax_type": "CGST", "tax_rate": 9}`` (``taxType``
    and ``taxRate`` are accepted too). CGST and SGST rates add up; an IGST
    rate is used only when neither is present.
    """

    rates = {name: Decimal("0") for name in TAX_TYPES}
    for component in taxes:
        tax_type = str(component.get("tax_type", component.get("taxType", ""))).upper()
        if tax_type not in TAX_TYPES:
            raise InvalidAmountError(
                "taxes", f"unknown tax type: {tax_type or None}", hint="use CGST, SGST or IGST"
            )
        rate = component.get("tax_rate", component.get("taxRate", 0))
        rates[tax_type] += non_negative(rate, "tax_rate")
    intrastate = rates["CGST"] + rates["SGST"]
    return intrastate if intrastate > 0 else rates["IGST"]


@dataclass(frozen=True)
class TaxBreakdown:
    """Tax split for a single rate."""

    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    total_tax: Decimal = ZERO

    def as_dict(self) -> dict[str, float]:
        return {k: float(v) for k, v in asdict(self).items()}


@dataclass(frozen=True)
class BillResult:
    """Fully itemised bill totals."""

    subtotal: Decimal = ZERO
    discount: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    total_tax: Decimal = ZERO
    service_charge: Decimal = ZERO
    final_amount: Decimal = ZERO

    def as_dict(self) -> dict[str, float]:
        return {k: float(v) for k, v in asdict(self).items()}
