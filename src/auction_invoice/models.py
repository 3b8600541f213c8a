"""
Pydantic models for the structured auction invoice record.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Exact cents in memory, plain JSON numbers on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json-unless-none"),
]


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CREDIT = "Credit"

    @classmethod
    def parse(cls, value: object) -> Optional["PaymentMethod"]:
        """Case-insensitive lookup; None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == s:
                return member
        return None


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class VendorPatternSpec(BaseModel):
    """Vendor patterns as persisted in the JSON pattern store (regex source strings)."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    identifier: str = Field(description="Regex identifying the vendor's invoices")
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    pickup_dates: Optional[str] = None


@dataclass(frozen=True)
class VendorProfile:
    """Identification and field-extraction patterns for one auction house's layout."""
    name: str
    identifier_pattern: re.Pattern
    phone_pattern: re.Pattern
    email_pattern: re.Pattern
    address_pattern: re.Pattern
    pickup_dates_pattern: re.Pattern

    @classmethod
    def from_spec(cls, name: str, spec: VendorPatternSpec, fallback: "VendorProfile") -> "VendorProfile":
        """Compile a persisted spec; missing field patterns come from fallback."""
        def _compile(src: Optional[str], default: re.Pattern, flags: int = re.I) -> re.Pattern:
            return re.compile(src, flags) if src else default

        return cls(
            name=name,
            identifier_pattern=re.compile(spec.identifier, re.I),
            phone_pattern=_compile(spec.phone, fallback.phone_pattern),
            email_pattern=_compile(spec.email, fallback.email_pattern),
            address_pattern=_compile(spec.address, fallback.address_pattern, re.I | re.M),
            pickup_dates_pattern=_compile(spec.pickup_dates, fallback.pickup_dates_pattern),
        )


class Address(_Record):
    """Structured pickup address. Equality is (one_line, address2)."""
    street: str
    address2: Optional[str] = None
    city: str
    state: str = Field(description="Two-letter state, upper case")
    zip: str = Field(description="Five-digit ZIP")
    one_line: str = Field(description='"{street}, {city} {state} {zip}"')

    @property
    def key(self) -> tuple[str, Optional[str]]:
        return (self.one_line, self.address2)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


class LotItem(_Record):
    lot_number: str
    description: str


class Totals(_Record):
    """Reconciled monetary totals; `total` is the single authoritative value."""
    subtotal: Optional[Money] = None
    tax: Optional[Money] = None
    premium: Optional[Money] = None
    total: Money = Decimal("0.00")
    cash_total: Optional[Money] = None
    credit_total: Optional[Money] = None
    convenience_fee: Optional[Money] = None


class ContactInfo(_Record):
    phone: list[str] = Field(default_factory=list)
    email: list[str] = Field(default_factory=list)


class InvoiceRecord(_Record):
    """Result for a single parsed invoice."""
    vendor: str
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    pickup_addresses: list[Address] = Field(default_factory=list)
    pickup_dates: list[str] = Field(default_factory=list)
    items: list[LotItem] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    special_notes: list[str] = Field(default_factory=list)


class ProcessedFile(BaseModel):
    """Outcome for one document in a folder run."""
    source_file: str
    output_file: Optional[str] = None
    record: Optional[InvoiceRecord] = None
    error: Optional[str] = None
