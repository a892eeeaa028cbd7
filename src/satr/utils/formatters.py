from __future__ import annotations

from datetime import datetime
from decimal import Decimal


def format_mxn(value: Decimal | str) -> str:
    """Format an amount as $X,XXX.XX."""
    d = Decimal(value)
    sign = "-" if d < 0 else ""
    return f"{sign}${abs(d):,.2f}"


def format_timestamp(value: datetime) -> str:
    """Format an issue timestamp as YYYY-MM-DD HH:MM:SS."""
    return value.strftime("%Y-%m-%d %H:%M:%S")
