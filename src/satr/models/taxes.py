from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from satr.services.exceptions import UnknownTaxKindError


class TaxKind(Enum):
    """Tax category of a withheld or carried-forward line (SAT ``c_Impuesto``)."""

    ISR = "001"
    IVA = "002"

    @classmethod
    def from_code(cls, code: str) -> TaxKind:
        """Map a ``c_Impuesto`` code to a TaxKind. Only ISR and IVA are supported."""
        try:
            return cls(code)
        except ValueError:
            raise UnknownTaxKindError(code) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TaxLine:
    kind: TaxKind
    amount: Decimal


def sum_tax_lines(lines: Iterable[TaxLine], kind: TaxKind) -> Decimal:
    return sum((line.amount for line in lines if line.kind is kind), Decimal("0"))


@dataclass(frozen=True)
class TaxSection:
    """Root ``Impuestos`` node: ``Retenciones`` (withheld) and ``Traslados`` (carried forward).

    A group that is missing from the document is ``None``, not an empty tuple.
    """

    withheld: tuple[TaxLine, ...] | None = None
    carried_forward: tuple[TaxLine, ...] | None = None

    def amount_for(self, kind: TaxKind) -> Decimal:
        total = Decimal("0")
        if self.withheld is not None:
            total += sum_tax_lines(self.withheld, kind)
        if self.carried_forward is not None:
            total += sum_tax_lines(self.carried_forward, kind)
        return total
