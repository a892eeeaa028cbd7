from __future__ import annotations

from collections.abc import Callable, Iterable
from decimal import Decimal
from enum import Enum

from satr.models.invoice import Invoice


class ReportField(Enum):
    """Monetary field a report adds up."""

    TOTAL = "total"
    SUBTOTAL = "subtotal"
    IVA = "iva"
    ISR = "isr"

    def select(self, invoice: Invoice) -> Decimal:
        return _SELECTORS[self](invoice)


_SELECTORS: dict[ReportField, Callable[[Invoice], Decimal]] = {
    ReportField.TOTAL: Invoice.total,
    ReportField.SUBTOTAL: Invoice.subtotal,
    ReportField.IVA: Invoice.iva_amount,
    ReportField.ISR: Invoice.isr_amount,
}


def aggregate(invoices: Iterable[Invoice], field: ReportField) -> Decimal:
    """Exact decimal sum of *field* over *invoices*; ``Decimal("0")`` when empty."""
    return sum((field.select(inv) for inv in invoices), Decimal("0"))
