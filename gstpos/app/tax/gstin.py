"""GSTIN validation and place-of-supply resolution."""

from __future__ import annotations

import re

from .models import Jurisdiction

GSTIN_RE = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")


class InvalidGSTINError(ValueError):
    """Raised when a GSTIN or state code cannot be parsed."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.code = "INVALID_GSTIN"
        self.hint = hint


def validate_gstin(value: str | None) -> bool:
    """Return ``True`` when ``value`` is a well-formed 15 character GSTIN.

    Letters must already be upper case; surrounding whitespace is ignored.
    """

    if not value:
        return False
    return bool(GSTIN_RE.match(value.strip()))


def state_code(gstin: str) -> str:
    """Return the two digit state code embedded in ``gstin``."""

    if not validate_gstin(gstin):
        raise InvalidGSTINError(
            f"invalid GSTIN: {gstin!r}", hint="expected format 22AAAAA0000A1Z5"
        )
    return gstin.strip()[:2]


def normalize_state_code(code: str | int) -> str:
    """Return ``code`` as a zero-padded two digit string, e.g. ``7 -> "07"``."""

    text = str(code).strip()
    if not text.isdigit() or not 1 <= int(text) <= 99:
        raise InvalidGSTINError(f"invalid state code: {code!r}")
    return f"{int(text):02d}"


def resolve_jurisdiction(
    supplier_state: str | int, customer_state: str | int | None = None
) -> Jurisdiction:
    """Decide between CGST/SGST and IGST for a sale.

    Walk-in customers without a known state are treated as intrastate.
    """

    if customer_state is None or str(customer_state).strip() == "":
        return Jurisdiction.SAME_STATE
    if normalize_state_code(supplier_state) == normalize_state_code(customer_state):
        return Jurisdiction.SAME_STATE
    return Jurisdiction.DIFFERENT_STATE
