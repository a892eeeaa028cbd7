from __future__ import annotations

import zipfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from satr.models.invoice import Invoice, LineItem
from satr.models.party import Issuer, Recipient
from satr.models.taxes import TaxKind, TaxLine, TaxSection

ISSUER_RFC = "AAA010101AAA"
RECIPIENT_RFC = "BBB020202BBB"

CFDI_NS = "http://www.sat.gob.mx/cfd/4"


def tax_xml(withheld: list[tuple[str, str]] | None, carried: list[tuple[str, str]] | None) -> str:
    parts = ["<cfdi:Impuestos>"]
    if withheld is not None:
        parts.append("<cfdi:Retenciones>")
        parts += [f'<cfdi:Retencion Impuesto="{c}" Importe="{a}"/>' for c, a in withheld]
        parts.append("</cfdi:Retenciones>")
    if carried is not None:
        parts.append("<cfdi:Traslados>")
        parts += [
            f'<cfdi:Traslado Base="100.00" Impuesto="{c}" TipoFactor="Tasa" Importe="{a}"/>'
            for c, a in carried
        ]
        parts.append("</cfdi:Traslados>")
    parts.append("</cfdi:Impuestos>")
    return "".join(parts)


def make_cfdi(
    *,
    issuer_rfc: str = ISSUER_RFC,
    recipient_rfc: str = RECIPIENT_RFC,
    fecha: str = "2024-01-10T12:00:00",
    subtotal: str = "100.00",
    total: str = "116.00",
    withheld: list[tuple[str, str]] | None = None,
    carried: list[tuple[str, str]] | None = (("002", "16.00"),),
    taxes: str | None = None,
) -> bytes:
    """Build a minimal CFDI 4.0 document."""
    if taxes is None:
        taxes = tax_xml(
            list(withheld) if withheld is not None else None,
            list(carried) if carried is not None else None,
        )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<cfdi:Comprobante xmlns:cfdi="{CFDI_NS}" Version="4.0" Fecha="{fecha}" FormaPago="03"
    SubTotal="{subtotal}" Moneda="MXN" Total="{total}" TipoDeComprobante="I"
    Exportacion="01" MetodoPago="PUE" LugarExpedicion="06000">
  <cfdi:Emisor Rfc="{issuer_rfc}" Nombre="EMISORA SA DE CV" RegimenFiscal="601"/>
  <cfdi:Receptor Rfc="{recipient_rfc}" Nombre="RECEPTORA SA DE CV" DomicilioFiscalReceptor="64000"
      RegimenFiscalReceptor="601" UsoCFDI="G03"/>
  <cfdi:Conceptos>
    <cfdi:Concepto ClaveProdServ="81112100" Cantidad="1" ClaveUnidad="E48" Unidad="Servicio"
        Descripcion="Hospedaje web" ValorUnitario="{subtotal}" Importe="{subtotal}"/>
  </cfdi:Conceptos>
  {taxes}
</cfdi:Comprobante>
""".encode()


def write_zip(path: Path, members: dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path


# --- Model fixtures ---


@pytest.fixture
def issuer() -> Issuer:
    return Issuer(rfc=ISSUER_RFC, name="EMISORA SA DE CV", fiscal_regime="601")


@pytest.fixture
def recipient() -> Recipient:
    return Recipient(
        rfc=RECIPIENT_RFC,
        name="RECEPTORA SA DE CV",
        postal_code="64000",
        fiscal_regime="601",
        cfdi_use="G03",
    )


@pytest.fixture
def make_invoice(issuer, recipient):
    def _make(
        issued_at: datetime = datetime(2024, 1, 10, 12, 0, 0),
        total: str = "116.00",
        subtotal: str = "100.00",
        taxes: TaxSection | None = None,
    ) -> Invoice:
        return Invoice(
            version="4.0",
            issued_at=issued_at,
            payment_form="03",
            subtotal_amount=Decimal(subtotal),
            currency="MXN",
            total_amount=Decimal(total),
            receipt_type="I",
            exportation="01",
            payment_method="PUE",
            place_of_issue="06000",
            issuer=issuer,
            recipient=recipient,
            line_items=(
                LineItem(
                    product_key="81112100",
                    quantity=Decimal("1"),
                    unit_key="E48",
                    unit="Servicio",
                    description="Hospedaje web",
                    unit_price=Decimal(subtotal),
                    value=Decimal(subtotal),
                ),
            ),
            taxes=taxes
            or TaxSection(carried_forward=(TaxLine(TaxKind.IVA, Decimal("16.00")),)),
        )

    return _make


# --- Filesystem fixtures ---


@pytest.fixture
def invoice_tree(tmp_path) -> Path:
    """Two invoices from AAA010101AAA: 116.00 on 2024-01-10 and 232.00 on 2024-06-01."""
    root = tmp_path / "facturas"
    (root / "2024" / "01").mkdir(parents=True)
    (root / "2024" / "06").mkdir(parents=True)
    (root / "2024" / "01" / "a.xml").write_bytes(
        make_cfdi(fecha="2024-01-10T09:30:00", subtotal="100.00", total="116.00")
    )
    write_zip(
        root / "2024" / "06" / "descarga.zip",
        {
            "b.xml": make_cfdi(
                fecha="2024-06-01T18:00:00",
                subtotal="200.00",
                total="232.00",
                carried=[("002", "32.00")],
            ),
            "b.pdf": b"%PDF-1.4",
        },
    )
    return root
