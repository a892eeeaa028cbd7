from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from satr.models.party import Issuer, Recipient
from satr.models.taxes import TaxKind, TaxSection


@dataclass(frozen=True)
class LineItem:
    """One ``Concepto`` of the invoice."""

    product_key: str
    quantity: Decimal
    unit_key: str
    unit: str
    description: str
    unit_price: Decimal
    value: Decimal


@dataclass(frozen=True)
class Invoice:
    """A parsed CFDI (``Comprobante``).

    ``total`` and ``subtotal`` are taken as declared in the document; they are
    never recomputed from the line items.
    """

    version: str
    issued_at: datetime  # Fecha, local time without offset
    payment_form: str
    subtotal_amount: Decimal
    currency: str
    total_amount: Decimal
    receipt_type: str
    exportation: str
    payment_method: str
    place_of_issue: str
    issuer: Issuer
    recipient: Recipient
    line_items: tuple[LineItem, ...]
    taxes: TaxSection

    def total(self) -> Decimal:
        return self.total_amount

    def subtotal(self) -> Decimal:
        return self.subtotal_amount

    def iva_amount(self) -> Decimal:
        """IVA withheld plus IVA carried forward."""
        return self.taxes.amount_for(TaxKind.IVA)

    def isr_amount(self) -> Decimal:
        """ISR withheld plus ISR carried forward."""
        return self.taxes.amount_for(TaxKind.ISR)
