"""
Lot item parser. Line-oriented over the raw text: item boundaries depend on
line structure, so the normalized single-line form is never used here.
"""
from __future__ import annotations

import re
from typing import Optional

from .models import LotItem
from .normalize import normalize, split_lines

# "<2-5 digit lot> <4-digit code> <description>"
LOT_LINE = re.compile(r"^\s*(\d{2,5})\s+(\d{4})\s+(.*\S)\s*$")
_LOCATION_LINE = re.compile(r"^\s*Location\s*:", re.I)

MIN_DESCRIPTION = 15
MAX_DESCRIPTION = 500
CONTINUATION_MIN = 10
CONTINUATION_MAX = 200

# Descriptions starting with these are page furniture, not lots
NON_ITEM_PREFIXES = ("invoice", "page", "date", "location")


def _clean_description(raw: str) -> str:
    """Collapse whitespace and drop a leading dash."""
    return re.sub(r"^-\s*", "", normalize(raw)).strip()


def _is_item_description(desc: str) -> bool:
    if not (MIN_DESCRIPTION <= len(desc) <= MAX_DESCRIPTION):
        return False
    return not desc.lower().startswith(NON_ITEM_PREFIXES)


def _is_continuation(line: str) -> bool:
    s = line.strip()
    if not s or not s[0].isupper():
        return False
    if not (CONTINUATION_MIN < len(s) < CONTINUATION_MAX):
        return False
    return not _LOCATION_LINE.match(s)


def extract_lot_items(text: str | None) -> list[LotItem]:
    """
    Scan lines for lot entries. The first occurrence of a lot number wins;
    continuation lines append to the most recently added item.
    """
    descriptions: dict[str, str] = {}
    current: Optional[str] = None

    for line in split_lines(text):
        m = LOT_LINE.match(line)
        if m:
            lot, desc = m.group(1), _clean_description(m.group(3))
            if _is_item_description(desc) and lot not in descriptions:
                descriptions[lot] = desc
                current = lot
            continue
        if current is not None and _is_continuation(line):
            descriptions[current] = f"{descriptions[current]} {normalize(line)}"

    return [LotItem(lot_number=lot, description=desc) for lot, desc in descriptions.items()]
