from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from lxml import etree

from satr.config import CFDI_DATETIME_FORMAT
from satr.models.invoice import Invoice, LineItem
from satr.models.party import Issuer, Recipient
from satr.models.taxes import TaxKind, TaxLine, TaxSection
from satr.services.exceptions import (
    DocumentParseError,
    InvalidValueError,
    MissingFieldError,
    SchemaMismatchError,
)
from satr.services.source_walker import RawDocument

logger = logging.getLogger(__name__)

ROOT_ELEMENT = "Comprobante"

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)

# lxml rejects str input that carries an encoding declaration
_XML_DECLARATION_RE = re.compile(r"^\ufeff?\s*<\?xml[^>]*\?>")


@dataclass(frozen=True)
class ParseOutcome:
    """Result of parsing one document: exactly one of invoice/error is set."""

    source: str
    invoice: Invoice | None = None
    error: DocumentParseError | None = None

    @property
    def ok(self) -> bool:
        return self.invoice is not None


def _local(el: etree._Element) -> str:
    return etree.QName(el).localname


def _children(el: etree._Element, name: str) -> list[etree._Element]:
    # Match on local name so both cfdi:-prefixed and bare documents are accepted
    return [c for c in el if isinstance(c.tag, str) and _local(c) == name]


def _child(el: etree._Element, name: str) -> etree._Element:
    found = _children(el, name)
    if not found:
        raise SchemaMismatchError(f"{_local(el)}: falta el nodo '{name}'")
    return found[0]


def _optional_child(el: etree._Element, name: str) -> etree._Element | None:
    found = _children(el, name)
    return found[0] if found else None


def _attr(el: etree._Element, name: str) -> str:
    value = el.get(name)
    if value is None:
        raise MissingFieldError(_local(el), name)
    return value


def _decimal(el: etree._Element, name: str) -> Decimal:
    raw = _attr(el, name)
    try:
        d = Decimal(raw.strip())
    except InvalidOperation:
        raise InvalidValueError(_local(el), name, raw) from None
    if not d.is_finite():
        raise InvalidValueError(_local(el), name, raw)
    return d


def _datetime(el: etree._Element, name: str) -> datetime:
    raw = _attr(el, name)
    try:
        return datetime.strptime(raw.strip(), CFDI_DATETIME_FORMAT)
    except ValueError:
        raise InvalidValueError(_local(el), name, raw) from None


def _parse_issuer(el: etree._Element) -> Issuer:
    return Issuer(
        rfc=_attr(el, "Rfc"),
        name=_attr(el, "Nombre"),
        fiscal_regime=_attr(el, "RegimenFiscal"),
    )


def _parse_recipient(el: etree._Element) -> Recipient:
    return Recipient(
        rfc=_attr(el, "Rfc"),
        name=_attr(el, "Nombre"),
        postal_code=_attr(el, "DomicilioFiscalReceptor"),
        fiscal_regime=_attr(el, "RegimenFiscalReceptor"),
        cfdi_use=_attr(el, "UsoCFDI"),
    )


def _parse_line_item(el: etree._Element) -> LineItem:
    return LineItem(
        product_key=_attr(el, "ClaveProdServ"),
        quantity=_decimal(el, "Cantidad"),
        unit_key=_attr(el, "ClaveUnidad"),
        unit=_attr(el, "Unidad"),
        description=_attr(el, "Descripcion"),
        unit_price=_decimal(el, "ValorUnitario"),
        value=_decimal(el, "Importe"),
    )


def _parse_tax_group(el: etree._Element | None, line_name: str) -> tuple[TaxLine, ...] | None:
    if el is None:
        return None
    return tuple(
        TaxLine(kind=TaxKind.from_code(_attr(line, "Impuesto")), amount=_decimal(line, "Importe"))
        for line in _children(el, line_name)
    )


def _parse_taxes(el: etree._Element) -> TaxSection:
    return TaxSection(
        withheld=_parse_tax_group(_optional_child(el, "Retenciones"), "Retencion"),
        carried_forward=_parse_tax_group(_optional_child(el, "Traslados"), "Traslado"),
    )


def parse_invoice(content: bytes | str) -> Invoice:
    """Parse one CFDI document into an Invoice.

    Raises a DocumentParseError subclass when the document is not a valid
    CFDI: malformed XML, wrong root, missing section or attribute, a bad
    decimal/timestamp, or a tax code other than 001/002.
    """
    if isinstance(content, str):
        content = _XML_DECLARATION_RE.sub("", content, count=1)
    try:
        root = etree.fromstring(content, parser=_PARSER)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise SchemaMismatchError(f"XML mal formado: {exc}") from exc

    if _local(root) != ROOT_ELEMENT:
        raise SchemaMismatchError(f"Nodo raíz inesperado: '{_local(root)}'")

    concepts = _child(root, "Conceptos")
    return Invoice(
        version=_attr(root, "Version"),
        issued_at=_datetime(root, "Fecha"),
        payment_form=_attr(root, "FormaPago"),
        subtotal_amount=_decimal(root, "SubTotal"),
        currency=_attr(root, "Moneda"),
        total_amount=_decimal(root, "Total"),
        receipt_type=_attr(root, "TipoDeComprobante"),
        exportation=_attr(root, "Exportacion"),
        payment_method=_attr(root, "MetodoPago"),
        place_of_issue=_attr(root, "LugarExpedicion"),
        issuer=_parse_issuer(_child(root, "Emisor")),
        recipient=_parse_recipient(_child(root, "Receptor")),
        line_items=tuple(_parse_line_item(c) for c in _children(concepts, "Concepto")),
        taxes=_parse_taxes(_child(root, "Impuestos")),
    )


def parse_document(raw: RawDocument) -> ParseOutcome:
    """Parse a RawDocument, capturing parse failures instead of raising them."""
    try:
        invoice = parse_invoice(raw.content)
    except DocumentParseError as exc:
        logger.debug("Skipping %s: %s", raw.source, exc)
        return ParseOutcome(source=raw.source, error=exc)
    return ParseOutcome(source=raw.source, invoice=invoice)
