"""Bill quote routes for the cashier screens.

Nothing is persisted here; the order service stores the returned bill.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from config import get_settings

from .services import billing_service
from .tax.gst_engine import compute_component_tax, compute_single_rate_tax
from .tax.gstin import state_code, validate_gstin
from .tax.models import Jurisdiction, LineItem, combined_tax_rate
from .tax.money import MAX_AMOUNT
from .utils.responses import ok

router = APIRouter()


class TaxRequest(BaseModel):
    amount: Decimal = Field(ge=0, le=MAX_AMOUNT)
    tax_rate: Decimal = Field(ge=0, le=100)
    jurisdiction: Jurisdiction = Jurisdiction.SAME_STATE


class ComponentTaxRequest(BaseModel):
    amount: Decimal = Field(ge=0, le=MAX_AMOUNT)
    cgst_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    sgst_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    igst_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class TaxComponent(BaseModel):
    tax_type: Literal["CGST", "SGST", "IGST"]
    tax_rate: Decimal = Field(ge=0, le=100)


class QuoteLine(BaseModel):
    price: Decimal = Field(ge=0, le=MAX_AMOUNT)
    quantity: int = Field(default=1, ge=0, le=int(MAX_AMOUNT))
    tax_rate: Decimal | None = Field(default=None, ge=0, le=100)
    taxes: list[TaxComponent] = []

    def effective_rate(self, default_rate: Decimal) -> Decimal:
        if self.taxes:
            return combined_tax_rate([t.model_dump() for t in self.taxes])
        return default_rate if self.tax_rate is None else self.tax_rate


class QuoteRequest(BaseModel):
    items: list[QuoteLine] = []
    jurisdiction: Jurisdiction | None = None
    customer_state: str | None = None
    customer_gstin: str | None = None
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    service_charge_rate: Decimal | None = Field(default=None, ge=0, le=100)


class BillStatus(BaseModel):
    final_amount: Decimal = Field(ge=0, le=MAX_AMOUNT)
    is_paid: bool = False


class SummaryRequest(BaseModel):
    bills: list[BillStatus] = []


@router.post("/bill/tax")
async def tax_split(payload: TaxRequest) -> dict:
    """Return the CGST/SGST or IGST split for a single amount."""
    result = compute_single_rate_tax(
        payload.amount, payload.tax_rate, payload.jurisdiction
    )
    return ok(result.as_dict())


@router.post("/bill/tax/components")
async def component_tax_split(payload: ComponentTaxRequest) -> dict:
    """Tax an amount at separately configured CGST, SGST and IGST rates."""
    result = compute_component_tax(
        payload.amount, payload.cgst_rate, payload.sgst_rate, payload.igst_rate
    )
    return ok(result.as_dict())


@router.post("/bill/quote")
async def bill_quote(payload: QuoteRequest) -> dict:
    """Compute a full bill for the posted order lines."""
    settings = get_settings()
    items = [
        LineItem.create(
            line.price, line.quantity, line.effective_rate(settings.default_tax_rate)
        )
        for line in payload.items
    ]
    bill = billing_service.build_bill(
        items,
        jurisdiction=payload.jurisdiction,
        customer_state=payload.customer_state,
        customer_gstin=payload.customer_gstin,
        discount=payload.discount,
        service_charge_rate=payload.service_charge_rate,
        settings=settings,
    )
    return ok(bill)


@router.post("/bill/summary")
async def bill_summary(payload: SummaryRequest) -> dict:
    bills = [b.model_dump() for b in payload.bills]
    return ok(billing_service.summarize_bills(bills))


@router.get("/gstin/{gstin}")
async def gstin_lookup(gstin: str) -> dict:
    valid = validate_gstin(gstin)
    return ok({"valid": valid, "state_code": state_code(gstin) if valid else None})
