from __future__ import annotations

import logging
import random
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Mapping, Sequence

from ..routes_metrics import bills_generated_total
from ..tax.gst_engine import compute_bill, weighted_tax_rate
from ..tax.gstin import resolve_jurisdiction, state_code
from ..tax.models import Jurisdiction, LineItem
from ..tax.money import ZERO, non_negative, round2, to_decimal

if TYPE_CHECKING:  # pragma: no cover
    from config import Settings

logger = logging.getLogger("gstpos.billing")


def generate_bill_number(
    prefix: str = "BILL",
    today: date | None = None,
    rng: random.Random | None = None,
) -> str:
    """Return a bill number such as ``BILL-20240115-042``.

    The suffix is random, so callers persisting bills must still enforce
    uniqueness.
    """
    today = today or date.today()
    rng = rng or random.Random()
    return f"{prefix}-{today:%Y%m%d}-{rng.randrange(1000):03d}"


def _line_items(
    items: Iterable[LineItem | Mapping[str, object]], default_rate: Decimal
) -> list[LineItem]:
    lines = []
    for item in items:
        if isinstance(item, LineItem):
            lines.append(item)
            continue
        if not ({"tax_rate", "gst"} & item.keys()) and not item.get("taxes"):
            item = {**item, "tax_rate": default_rate}
        lines.append(LineItem.from_mapping(item))
    return lines


def _customer_state(
    customer_state: str | None, customer_gstin: str | None
) -> str | None:
    # validated even when customer_state is given
    gstin_state = state_code(customer_gstin) if customer_gstin else None
    return customer_state or gstin_state


def build_bill(
    items: Iterable[LineItem | Mapping[str, object]],
    *,
    jurisdiction: Jurisdiction | str | None = None,
    customer_state: str | None = None,
    customer_gstin: str | None = None,
    discount: object = 0,
    service_charge_rate: object | None = None,
    settings: Settings | None = None,
    today: date | None = None,
    rng: random.Random | None = None,
) -> dict:
    """Build a render-friendly bill record for an order.

    Lines without a ``tax_rate`` or ``taxes`` list use
    ``settings.default_tax_rate``. A ``customer_gstin`` must be valid
    whenever it is given, because it is printed on the bill. When
    ``jurisdiction`` is omitted it is resolved from the configured home state
    against ``customer_state`` (or the state code in ``customer_gstin``);
    without a home state every sale is treated as intrastate.
    ``service_charge_rate`` falls back to ``settings.service_charge_rate``.
    """
    if settings is None:
        from config import get_settings

        settings = get_settings()

    lines = _line_items(items, settings.default_tax_rate)
    buyer_state = _customer_state(customer_state, customer_gstin)

    if jurisdiction is None:
        supplier_state = settings.supplier_state_code
        if supplier_state is None:
            jurisdiction = Jurisdiction.SAME_STATE
        else:
            jurisdiction = resolve_jurisdiction(supplier_state, buyer_state)
    jurisdiction = Jurisdiction(jurisdiction)

    if service_charge_rate is None:
        service_charge_rate = settings.service_charge_rate

    result = compute_bill(
        lines,
        jurisdiction,
        service_charge_rate=service_charge_rate,
        discount=discount,
    )
    number = generate_bill_number(settings.bill_prefix, today=today, rng=rng)

    bill = {
        "bill_number": number,
        "hotel_name": settings.hotel_name,
        "hotel_address": settings.hotel_address,
        "jurisdiction": jurisdiction.value,
        "tax_rate": float(round2(weighted_tax_rate(lines))),
        "service_charge_rate": float(non_negative(service_charge_rate)),
        "items": [
            {
                "price": float(line.unit_price),
                "quantity": line.quantity,
                "tax_rate": float(line.tax_rate),
                "line_total": float(round2(line.line_total)),
            }
            for line in lines
        ],
        **result.as_dict(),
    }
    if settings.gst_number:
        bill["gstin"] = settings.gst_number
    if customer_gstin:
        bill["customer_gstin"] = customer_gstin.strip()

    bills_generated_total.inc()
    logger.info(
        "bill generated",
        extra={"bill_number": number},
    )
    return bill


def summarize_bills(bills: Sequence[Mapping[str, object]]) -> dict:
    """Return counts and revenue totals for the cashier dashboard.

    Each bill mapping needs ``final_amount`` and ``is_paid``.
    """
    paid = [b for b in bills if b.get("is_paid")]
    unpaid = [b for b in bills if not b.get("is_paid")]

    def _revenue(rows: Sequence[Mapping[str, object]]) -> Decimal:
        return round2(
            sum((to_decimal(b.get("final_amount", 0)) for b in rows), ZERO)
        )

    return {
        "total": len(bills),
        "paid": len(paid),
        "unpaid": len(unpaid),
        "total_revenue": float(_revenue(bills)),
        "paid_revenue": float(_revenue(paid)),
        "pending_revenue": float(_revenue(unpaid)),
    }


def format_inr(amount: object) -> str:
    """Format ``amount`` as rupees with Indian digit grouping.

    >>> format_inr(123456.5)
    '₹1,23,456.50'
    """
    value = round2(to_decimal(amount))
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}₹{whole}.{frac}"
