"""
Exceptions surfaced by the extraction core and its wrappers.
"""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Optional


class InvoiceParseError(Exception):
    """Base class for all auction invoice errors."""


class TotalsAmbiguous(InvoiceParseError):
    """
    Strict totals mode could not settle on one authoritative total.
    Carries the conflicting label and both values so the caller can act on it.
    """

    def __init__(
        self,
        reason: str,
        label: Optional[str] = None,
        expected: Optional[Decimal] = None,
        found: Optional[Decimal] = None,
    ) -> None:
        self.reason = reason
        self.label = label
        self.expected = expected
        self.found = found
        super().__init__(reason)


class NoExtractableText(InvoiceParseError):
    """A text extractor produced nothing usable for the given document."""

    def __init__(self, source: str | Path) -> None:
        self.source = str(source)
        super().__init__(f"No extractable text in {self.source}")


class PatternStoreError(InvoiceParseError):
    """The persisted vendor pattern store could not be read or validated."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Invalid pattern store {self.path}: {reason}")
