"""
Monetary helpers shared by the totals engine: dollar-token parsing and
epsilon comparison. Amounts are exact Decimals quantized to cents.
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

CENT = Decimal("0.01")
EPSILON = Decimal("0.01")

# "$" + digits/commas + exactly two decimals, e.g. "$1,234.50"
DOLLAR_AMOUNT = re.compile(r"\$(\d[\d,]*\.\d{2})(?!\d)")


def to_decimal(value: object) -> Optional[Decimal]:
    """Coerce str/int/float/Decimal to a cent-quantized Decimal, or None."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        d = value
    else:
        s = re.sub(r"[^\d.\-]", "", str(value))
        if not s:
            return None
        try:
            d = Decimal(s)
        except InvalidOperation:
            return None
    return d.quantize(CENT)


def parse_amount(token: str | None) -> Optional[Decimal]:
    """Parse "$1,234.56" (or "1,234.56") into Decimal("1234.56")."""
    if not token:
        return None
    return to_decimal(token.replace(",", "").replace("$", "").strip())


def find_amount(text: str) -> Optional[Decimal]:
    """First dollar-amount token in text, if any."""
    m = DOLLAR_AMOUNT.search(text or "")
    return parse_amount(m.group(1)) if m else None


def near_equal(a: Optional[Decimal], b: Optional[Decimal], epsilon: Decimal = EPSILON) -> bool:
    """True when both amounts are known and differ by no more than epsilon."""
    if a is None or b is None:
        return False
    return abs(a - b) <= epsilon


def format_money(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return f"${value:,.2f}"
