"""
Vendor detection from invoice text.
Ordered (predicate, profile) matching over a lazily loaded, read-only registry
of per-vendor regex patterns; unknown layouts get a generic profile.
"""
from __future__ import annotations

import json
import re
import threading
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from pydantic import ValidationError

from .errors import PatternStoreError
from .fields import DAY_NAME
from .models import VendorPatternSpec, VendorProfile

UNKNOWN_VENDOR = "Unknown"

# Loose 10-digit shape; validity (area code / exchange ranges) is checked later
PHONE_SHAPE = r"(?<!\d)\(?\d{3}\)?[\s.\-]?\d{3}[\s.\-]?\d{4}(?!\d)"
EMAIL_SHAPE = r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}"
# Full one-line address in raw text: "123 Main St, Springfield, IL 62701"
ADDRESS_SHAPE = (
    r"(?<![\w/])(?P<street>\d{1,6}[ \t]+[^,\n$]{3,80}?),[ \t]*"
    r"(?P<city>[A-Za-z][A-Za-z .'\-]{1,40}?),?[ \t]+"
    r"(?P<state>[A-Za-z]{2})[ \t]+(?P<zip>\d{5})(?:-\d{4})?\b"
)
PICKUP_SHAPE = (
    rf"pick\s*-?\s*up\s+(?:dates?|times?)\s*:?\s*{DAY_NAME}\s+\d{{1,2}}/\d{{1,2}}(?:/\d{{2,4}})?"
    rf"(?:\s*(?:-|thru|through|to)\s*{DAY_NAME}\s+\d{{1,2}}/\d{{1,2}}(?:/\d{{2,4}})?)?"
)

UNKNOWN_PROFILE = VendorProfile(
    name=UNKNOWN_VENDOR,
    identifier_pattern=re.compile(r"(?!x)x"),
    phone_pattern=re.compile(PHONE_SHAPE),
    email_pattern=re.compile(EMAIL_SHAPE),
    address_pattern=re.compile(ADDRESS_SHAPE, re.I | re.M),
    pickup_dates_pattern=re.compile(PICKUP_SHAPE, re.I),
)

# High-volume vendor checked before the general scan
FAST_PATH_VENDOR = "Tri-State Industrial Auctions"
FAST_PATH_PATTERN = re.compile(r"tri[\s\-]*state\s+industrial", re.I)

# Built-in seeds, same shape as the persisted JSON store; order is scan order
SEED_PATTERNS: dict[str, VendorPatternSpec] = {
    FAST_PATH_VENDOR: VendorPatternSpec(
        identifier=r"tri[\s\-]*state\s+industrial\s+auctions?",
        address=(
            r"Removal\s+at:?[ \t]*(?P<street>[^,\n]{5,80}?),[ \t]*(?P<city>[A-Za-z .'\-]{2,40}?),?"
            r"[ \t]+(?P<state>[A-Za-z]{2})[ \t]+(?P<zip>\d{5})\b"
        ),
        pickup_dates=(
            rf"removal\s*:\s*{DAY_NAME}\s+\d{{1,2}}/\d{{1,2}}"
            rf"(?:\s*(?:-|thru|through)\s*{DAY_NAME}\s+\d{{1,2}}/\d{{1,2}})?"
        ),
    ),
    "Great Lakes Liquidation": VendorPatternSpec(
        identifier=r"great\s+lakes\s+liquidation",
        email=r"[A-Za-z0-9._%+\-]+@greatlakesliquidation\.com",
    ),
    "Heartland Equipment Auctions": VendorPatternSpec(
        identifier=r"heartland\s+equipment\s+auctions?|heartlandauctions\.com",
        address=(
            r"Sale\s+Site:?[ \t]*(?P<street>[^,\n]{5,80}?)[ \t]*[\-,][ \t]*(?P<city>[A-Za-z .'\-]{2,40}?),"
            r"[ \t]*(?P<state>[A-Za-z]{2})[ \t]+(?P<zip>\d{5})\b"
        ),
    ),
    "Midwest Surplus Auction Co": VendorPatternSpec(
        identifier=r"midwest\s+surplus\s+auction",
        pickup_dates=rf"loadout\s*:\s*{DAY_NAME}\s+\d{{1,2}}/\d{{1,2}}(?:\s*-\s*{DAY_NAME}\s+\d{{1,2}}/\d{{1,2}})?",
    ),
}

Rule = tuple[Callable[[str], bool], VendorProfile]


def _read_store(path: Path) -> dict[str, VendorPatternSpec]:
    """Load and validate a persisted pattern store: {vendor name: patterns}."""
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PatternStoreError(path, str(e)) from e
    if not isinstance(raw, dict):
        raise PatternStoreError(path, "top level must be an object of vendor name -> patterns")

    specs: dict[str, VendorPatternSpec] = {}
    for name, entry in raw.items():
        try:
            spec = VendorPatternSpec.model_validate(entry)
            for src in (spec.identifier, spec.phone, spec.email, spec.address, spec.pickup_dates):
                if src:
                    re.compile(src)
        except (ValidationError, re.error) as e:
            raise PatternStoreError(path, f"vendor {name!r}: {e}") from e
        specs[str(name).strip()] = spec
    return specs


class VendorRegistry:
    """
    Read-only mapping of vendor name -> VendorProfile, loaded once on first use.
    Safe to share between threads; identify() has no side effects beyond the load.
    """

    def __init__(
        self,
        store_path: str | Path | None = None,
        seeds: Optional[dict[str, VendorPatternSpec]] = None,
    ) -> None:
        self._store_path = Path(store_path) if store_path else None
        self._seeds = dict(SEED_PATTERNS if seeds is None else seeds)
        self._profiles: Optional[dict[str, VendorProfile]] = None
        self._rules: list[Rule] = []
        self._lock = threading.Lock()

    def _load_specs(self) -> dict[str, VendorPatternSpec]:
        specs = dict(self._seeds)
        if self._store_path is None or not self._store_path.exists():
            return specs
        try:
            stored = _read_store(self._store_path)
        except PatternStoreError as e:
            logger.warning("Ignoring vendor pattern store", path=e.path, reason=e.reason)
            return specs
        # Same name replaces a seed in place; new names are appended in file order
        specs.update(stored)
        logger.debug("Loaded vendor pattern store", path=str(self._store_path), vendors=len(stored))
        return specs

    def _ensure_loaded(self) -> None:
        if self._profiles is not None:
            return
        with self._lock:
            if self._profiles is not None:
                return
            profiles = {
                name: VendorProfile.from_spec(name, spec, UNKNOWN_PROFILE)
                for name, spec in self._load_specs().items()
            }
            rules: list[Rule] = []
            fast = profiles.get(FAST_PATH_VENDOR)
            if fast is not None:
                rules.append((lambda t: bool(FAST_PATH_PATTERN.search(t)), fast))
            for profile in profiles.values():
                rules.append((lambda t, p=profile.identifier_pattern: bool(p.search(t)), profile))
            self._rules = rules
            self._profiles = profiles

    def names(self) -> list[str]:
        self._ensure_loaded()
        return list(self._profiles)

    def get(self, name: str) -> Optional[VendorProfile]:
        self._ensure_loaded()
        return self._profiles.get(name)

    def identify(self, text: str | None) -> VendorProfile:
        """First matching rule wins; the generic Unknown profile otherwise."""
        self._ensure_loaded()
        if text:
            for predicate, profile in self._rules:
                if predicate(text):
                    logger.debug("Vendor identified", vendor=profile.name)
                    return profile
        return UNKNOWN_PROFILE


_default_registry: Optional[VendorRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> VendorRegistry:
    """Process-wide registry using the configured pattern store path."""
    global _default_registry
    if _default_registry is not None:
        return _default_registry
    with _default_lock:
        if _default_registry is None:
            from .config import load_settings
            _default_registry = VendorRegistry(load_settings().patterns_path)
    return _default_registry


def identify_vendor(text: str | None, registry: Optional[VendorRegistry] = None) -> VendorProfile:
    return (registry or get_default_registry()).identify(text)
