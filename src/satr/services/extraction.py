from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from decimal import Decimal

from satr.models.invoice import Invoice
from satr.services.aggregator import ReportField, aggregate
from satr.services.cfdi_parser import ParseOutcome, parse_document
from satr.services.invoice_filter import InvoiceFilter
from satr.services.source_walker import walk_documents

logger = logging.getLogger(__name__)


class InvoicePipeline:
    """Lazy walk, parse and filter over a directory tree.

    Each iteration starts a fresh walk, so the same pipeline can be consumed
    more than once. Documents that fail to parse are dropped and recorded in
    ``skipped`` for the most recent iteration; an ExtractionError from the walk
    propagates and ends the iteration.
    """

    def __init__(self, root: str | os.PathLike[str], invoice_filter: InvoiceFilter) -> None:
        self.root = root
        self.invoice_filter = invoice_filter
        self.skipped: list[ParseOutcome] = []

    def __iter__(self) -> Iterator[Invoice]:
        self.skipped = []
        seen = 0
        for raw in walk_documents(self.root):
            seen += 1
            outcome = parse_document(raw)
            if outcome.invoice is None:
                self.skipped.append(outcome)
                continue
            if self.invoice_filter.matches(outcome.invoice):
                yield outcome.invoice
        if self.skipped:
            logger.info(
                "Skipped %d of %d documents under %s that are not valid CFDI",
                len(self.skipped),
                seen,
                self.root,
            )


def extract_all(root: str | os.PathLike[str], invoice_filter: InvoiceFilter) -> list[Invoice]:
    """Every matching invoice under *root*, sorted by issue timestamp ascending."""
    invoices = list(InvoicePipeline(root, invoice_filter))
    invoices.sort(key=lambda inv: inv.issued_at)
    return invoices


def aggregate_report(
    root: str | os.PathLike[str],
    invoice_filter: InvoiceFilter,
    field: ReportField,
) -> Decimal:
    """Sum *field* over every matching invoice under *root* without retaining them."""
    return aggregate(InvoicePipeline(root, invoice_filter), field)
