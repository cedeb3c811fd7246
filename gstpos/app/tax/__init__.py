"""GST engine: tax splits, bill aggregation and GSTIN helpers."""

from .gst_engine import (
    compute_bill,
    compute_component_tax,
    compute_single_rate_tax,
    weighted_tax_rate,
)
from .gstin import InvalidGSTINError, resolve_jurisdiction, state_code, validate_gstin
from .models import BillResult, Jurisdiction, LineItem, TaxBreakdown, combined_tax_rate
from .money import MAX_AMOUNT, InvalidAmountError, round2

__all__ = [
    "BillResult",
    "InvalidAmountError",
    "InvalidGSTINError",
    "Jurisdiction",
    "LineItem",
    "MAX_AMOUNT",
    "TaxBreakdown",
    "combined_tax_rate",
    "compute_bill",
    "compute_component_tax",
    "compute_single_rate_tax",
    "resolve_jurisdiction",
    "round2",
    "state_code",
    "validate_gstin",
    "weighted_tax_rate",
]
