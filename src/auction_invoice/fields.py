"""
Single-value and contact field extractors.
Each function is pure over (text, profile) and can run in any order.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional

from .models import VendorProfile
from .normalize import normalize, split_lines

DAY_NAME = r"(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)[a-z]*\.?,?"
_MONTH_DAY = r"\d{1,2}/\d{1,2}"

# Invoice number: vendor-agnostic numeric-dash first, then "Invoice # :"
_NUMERIC_DASH_NUMBER = re.compile(r"(?<![\d\-])(\d{4}-\d{6}-\d+)(?![\d\-])")
_INVOICE_HASH_NUMBER = re.compile(r"Invoice\s*#\s*:?\s*([A-Za-z0-9][A-Za-z0-9\-]*)", re.I)

_DATE_PATTERNS = [
    re.compile(r"\bDate:\s*(\d{1,2}/\d{1,2}/\d{4})\b", re.I),
    re.compile(r"Invoice\s+Date:[ \t]*(\S[^\n]*?)[ \t]*(?:\n|$|[ \t]{2,})", re.I),
    re.compile(r"\b(\d{1,2}-[A-Za-z]{3}-\d{4}\s+\d{1,2}:\d{2})\b"),
]

_PICKUP_PHRASES = [
    re.compile(
        rf"load\s+times?\s+for\s+materials\b.{{0,120}}?"
        rf"{DAY_NAME}\s+{_MONTH_DAY}\s+(?:thru|through)\s+{DAY_NAME}\s+{_MONTH_DAY}",
        re.I,
    ),
    re.compile(
        rf"load\s+times?\s+for\s+(?:racking|equipment)\b(?:\s*(?:and|&|/)\s*(?:racking|equipment))?.{{0,120}}?"
        rf"{DAY_NAME}\s+{_MONTH_DAY}\s+(?:thru|through)\s+{DAY_NAME}\s+{_MONTH_DAY}",
        re.I,
    ),
    re.compile(
        rf"payment\s+must\s+be\s+received\s+by\s+{DAY_NAME}\s+\d{{1,2}}/\d{{1,2}}/\d{{2}}(?:\d{{2}})?"
        r"\s+at\s+\d{1,2}(?::\d{2})?(?:\s*[ap]\.?m\b\.?)?",
        re.I,
    ),
]

_NOTE_LINE = re.compile(r"^\s*(?:Special\s+Instructions|Notes?|Important)\s*:\s*(.+?)\s*$", re.I)


def _unique(values: Iterable[str]) -> list[str]:
    """De-duplicate preserving first-seen order."""
    return list(dict.fromkeys(v for v in values if v))


def extract_invoice_number(text: str | None) -> Optional[str]:
    if not text:
        return None
    m = _NUMERIC_DASH_NUMBER.search(text) or _INVOICE_HASH_NUMBER.search(text)
    return m.group(1) if m else None


def extract_invoice_date(text: str | None) -> Optional[str]:
    """Date: MM/DD/YYYY, then Invoice Date: <anything on the line>, then DD-Mon-YYYY HH:MM."""
    if not text:
        return None
    for pattern in _DATE_PATTERNS:
        m = pattern.search(text)
        if m:
            return normalize(m.group(1))
    return None


def _phone_digits(candidate: str) -> str:
    return re.sub(r"\D", "", candidate or "")


def is_valid_phone(candidate: str) -> bool:
    """Exactly 10 digits with area code and exchange both in 200-999."""
    digits = _phone_digits(candidate)
    if len(digits) != 10:
        return False
    return 200 <= int(digits[:3]) <= 999 and 200 <= int(digits[3:6]) <= 999


def format_phone(candidate: str) -> Optional[str]:
    if not is_valid_phone(candidate):
        return None
    d = _phone_digits(candidate)
    return f"({d[:3]}) {d[3:6]}-{d[6:]}"


def extract_phones(text: str | None, profile: VendorProfile) -> list[str]:
    flat = normalize(text)
    return _unique(format_phone(m.group(0)) for m in profile.phone_pattern.finditer(flat))


def extract_emails(text: str | None, profile: VendorProfile) -> list[str]:
    flat = normalize(text)
    return _unique(m.group(0).lower() for m in profile.email_pattern.finditer(flat))


def extract_pickup_dates(text: str | None, profile: VendorProfile) -> list[str]:
    """Distinct pickup/payment window phrases: known phrases plus the vendor's own pattern."""
    flat = normalize(text)
    if not flat:
        return []
    found: list[str] = []
    for pattern in [*_PICKUP_PHRASES, profile.pickup_dates_pattern]:
        found.extend(normalize(m.group(0)).rstrip(",") for m in pattern.finditer(flat))
    return _unique(found)


def extract_special_notes(text: str | None) -> list[str]:
    """Free-form lines labelled Note/Notes/Special Instructions/Important."""
    notes = []
    for line in split_lines(text):
        m = _NOTE_LINE.match(line)
        if m:
            notes.append(normalize(m.group(1)))
    return _unique(notes)
