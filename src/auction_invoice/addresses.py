"""
Pickup address extraction.
Two passes merged and de-duplicated: the vendor's full-address regex over raw
text (punctuation intact), then "Location:" label scans over normalized text.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional

from .models import Address, VendorProfile
from .normalize import normalize

_LOCATION_PATTERNS = [
    # Location: 290 West 750 North, Howe, IN 46746
    re.compile(
        r"Location:\s*(?P<street>[^,]{3,100}?),\s*(?P<city>[A-Za-z][A-Za-z .'\-]{1,40}?),?"
        r"\s+(?P<state>[A-Za-z]{2})\s+(?P<zip>\d{5})(?:-\d{4})?\b",
        re.I,
    ),
    # Location: 290 West 750 North Howe IN 46746
    re.compile(
        r"Location:\s*(?P<street>\d{1,6}\s+[^,]{3,100}?)\s+(?P<city>[A-Za-z][A-Za-z.'\-]+),?"
        r"\s+(?P<state>[A-Za-z]{2})\s+(?P<zip>\d{5})(?:-\d{4})?\b",
        re.I,
    ),
]

_PARENTHETICAL = re.compile(r"\(([^)]*)\)")


def build_address(street: str, city: str, state: str, zip_code: str) -> Address:
    """
    Clean raw address parts. Parenthetical content in the street becomes
    address2 and is removed from the street, e.g.
    "290 West 750 North (Plant 208/209)" -> street "290 West 750 North", address2 "Plant 208/209".
    """
    street = normalize(street)
    address2: Optional[str] = None
    m = _PARENTHETICAL.search(street)
    if m:
        address2 = normalize(m.group(1)) or None
        street = normalize(_PARENTHETICAL.sub(" ", street))
    street = street.strip(" ,")
    city = normalize(city).strip(" ,")
    state = normalize(state).upper()
    zip_code = normalize(zip_code)
    return Address(
        street=street,
        address2=address2,
        city=city,
        state=state,
        zip=zip_code,
        one_line=f"{street}, {city} {state} {zip_code}",
    )


def _from_matches(matches: Iterable[re.Match]) -> list[Address]:
    out = []
    for m in matches:
        parts = m.groupdict()
        if not all(parts.get(k) for k in ("street", "city", "state", "zip")):
            continue
        out.append(build_address(parts["street"], parts["city"], parts["state"], parts["zip"]))
    return out


def dedupe_addresses(addresses: Iterable[Address]) -> list[Address]:
    """Keep the first address per (one_line, address2)."""
    seen: dict[tuple[str, Optional[str]], Address] = {}
    for a in addresses:
        seen.setdefault(a.key, a)
    return list(seen.values())


def extract_addresses(text: str | None, profile: VendorProfile) -> list[Address]:
    if not text:
        return []
    found = _from_matches(profile.address_pattern.finditer(text))
    flat = normalize(text)
    for pattern in _LOCATION_PATTERNS:
        found.extend(_from_matches(pattern.finditer(flat)))
    return dedupe_addresses(found)
