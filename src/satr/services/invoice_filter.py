from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from satr.config import EARLIEST_DATE
from satr.models.invoice import Invoice


class SubjectKind(Enum):
    """Which party of the invoice the RFC is compared against."""

    ISSUER = "emisor"
    RECIPIENT = "receptor"


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [start, end] range of issue timestamps."""

    start: datetime
    end: datetime

    @classmethod
    def from_dates(
        cls,
        start: date | None = None,
        end: date | None = None,
        now: datetime | None = None,
    ) -> DateWindow:
        """Build a window from optional calendar dates.

        A given date becomes midnight of that day. Without a start the window
        opens at 1900-01-01; without an end it closes at *now* (the current
        local time by default).
        """
        start_dt = datetime.combine(start, datetime.min.time()) if start else EARLIEST_DATE
        if end is not None:
            end_dt = datetime.combine(end, datetime.min.time())
        else:
            end_dt = now or datetime.now()
        return cls(start=start_dt, end=end_dt)


def matches(
    invoice: Invoice,
    subject_kind: SubjectKind,
    subject_rfc: str,
    date_start: datetime,
    date_end: datetime,
) -> bool:
    """True when the subject party's RFC equals *subject_rfc* and the invoice
    was issued within [date_start, date_end], both ends included."""
    if subject_kind is SubjectKind.ISSUER:
        rfc = invoice.issuer.rfc
    else:
        rfc = invoice.recipient.rfc
    if rfc != subject_rfc:
        return False
    return date_start <= invoice.issued_at <= date_end


@dataclass(frozen=True)
class InvoiceFilter:
    subject_kind: SubjectKind
    subject_rfc: str
    window: DateWindow

    @classmethod
    def build(
        cls,
        subject_kind: SubjectKind,
        subject_rfc: str,
        date_start: date | None = None,
        date_end: date | None = None,
    ) -> InvoiceFilter:
        """Filter for *subject_rfc* with the default open bounds applied."""
        return cls(subject_kind, subject_rfc, DateWindow.from_dates(date_start, date_end))

    def matches(self, invoice: Invoice) -> bool:
        return matches(
            invoice,
            self.subject_kind,
            self.subject_rfc,
            self.window.start,
            self.window.end,
        )
