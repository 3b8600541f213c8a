"""
Runtime settings read from the environment (and a local .env file).
Only the wrapper layer and the default registry consult these; the parsing
core takes every option as an explicit argument.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from .models import PaymentMethod
from .totals import DEFAULT_WINDOW

load_dotenv()

DEFAULT_PATTERNS_PATH = "vendor_patterns.json"


@dataclass(frozen=True)
class Settings:
    patterns_path: Path
    totals_window: int
    payment_method: PaymentMethod
    strict_totals: bool
    log_level: str


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid integer setting, using default", setting=name, value=raw, default=default)
        return default
    if value <= 0:
        logger.warning("Non-positive setting, using default", setting=name, value=raw, default=default)
        return default
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    logger.warning("Invalid boolean setting, using default", setting=name, value=raw, default=default)
    return default


def load_settings() -> Settings:
    """Read AUCTION_INVOICE_* variables; bad values fall back to defaults."""
    method_raw = os.getenv("AUCTION_INVOICE_PAYMENT_METHOD", PaymentMethod.CASH.value)
    method = PaymentMethod.parse(method_raw)
    if method is None:
        logger.warning("Unknown payment method setting, using Cash", value=method_raw)
        method = PaymentMethod.CASH

    return Settings(
        patterns_path=Path(os.getenv("AUCTION_INVOICE_PATTERNS") or DEFAULT_PATTERNS_PATH),
        totals_window=_env_int("AUCTION_INVOICE_TOTALS_WINDOW", DEFAULT_WINDOW),
        payment_method=method,
        strict_totals=_env_bool("AUCTION_INVOICE_STRICT_TOTALS", False),
        log_level=(os.getenv("AUCTION_INVOICE_LOG_LEVEL") or "INFO").upper(),
    )
