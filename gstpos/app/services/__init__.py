"""Service layer helpers for the API."""

from .billing_service import build_bill, format_inr, generate_bill_number, summarize_bills

__all__ = ["build_bill", "format_inr", "generate_bill_number", "summarize_bills"]
