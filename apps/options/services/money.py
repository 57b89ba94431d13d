"""
Decimal helpers for option surcharges and cart line prices.

Amounts arrive from JSON payloads, form posts and cart attributes, so they may
be strings, numbers or garbage. Parsing never raises: anything that is not a
finite number becomes ``None`` and callers treat that as "no adjustment".
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

CENT = Decimal('0.01')


def parse_amount(raw: Any) -> Optional[Decimal]:
    """
    Parse a currency amount.

    Returns:
        The amount as a Decimal, or None for empty, malformed or non-finite input
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, Decimal):
        amount = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except (InvalidOperation, ValueError):
            return None

    if not amount.is_finite():
        return None
    return amount


def is_positive(amount: Optional[Decimal]) -> bool:
    return amount is not None and amount > 0


def format_amount(amount: Decimal) -> str:
    """Two decimal places, used in price badges."""
    return str(amount.quantize(CENT))
