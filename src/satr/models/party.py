from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Issuer:
    """Emisor: the taxpayer who issued the CFDI."""

    rfc: str
    name: str
    fiscal_regime: str


@dataclass(frozen=True)
class Recipient:
    """Receptor: the taxpayer the CFDI was issued to."""

    rfc: str
    name: str
    postal_code: str  # DomicilioFiscalReceptor
    fiscal_regime: str
    cfdi_use: str
