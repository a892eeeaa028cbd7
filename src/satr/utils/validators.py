from __future__ import annotations

import re
from datetime import date

# 3 letters for legal entities, 4 for individuals; Ñ and & are valid
_RFC_RE = re.compile(r"[A-ZÑ&]{3,4}\d{6}[A-Z0-9]{3}")


def validate_date(value: str) -> date:
    """Parse an ISO date string (YYYY-MM-DD).

    Raises ValueError for invalid dates.
    """
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Fecha inválida: '{value}'. Use YYYY-MM-DD.") from None


def validate_rfc(value: str) -> str:
    """Normalize an RFC to upper case and check its shape (12 or 13 characters)."""
    rfc = value.strip().upper()
    if not _RFC_RE.fullmatch(rfc):
        raise ValueError(f"RFC inválido: '{value}'")
    return rfc


def validate_date_range(start: date | None, end: date | None) -> None:
    """Raise ValueError when both bounds are given and start is after end."""
    if start is not None and end is not None and start > end:
        raise ValueError(f"La fecha inicial {start} es posterior a la final {end}")
