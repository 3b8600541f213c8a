"""
Record serialization: JSON, a human-readable summary, and the logistics
config shape used by downstream pickup automation.
"""
from __future__ import annotations

import json
from typing import Any, Optional

from .models import InvoiceRecord, PaymentMethod
from .money import format_money
from .normalize import normalize


def to_dict(record: InvoiceRecord) -> dict[str, Any]:
    return record.model_dump(by_alias=True, mode="json")


def to_json(record: InvoiceRecord, indent: int = 2) -> str:
    """Stable JSON: identical records always serialize byte-for-byte the same."""
    return json.dumps(to_dict(record), indent=indent, ensure_ascii=False)


def _first(values: list) -> Optional[Any]:
    return values[0] if values else None


def email_subject(record: InvoiceRecord) -> str:
    """Single-line subject from the primary address and pickup window."""
    parts = [f"Pickup Request: {record.vendor}"]
    if record.invoice_number:
        parts.append(f"Invoice {record.invoice_number}")
    address = _first(record.pickup_addresses)
    if address is not None:
        parts.append(f"{address.city}, {address.state}")
    pickup = _first(record.pickup_dates)
    if pickup:
        parts.append(pickup)
    return normalize(" - ".join(parts))


def pickup_address_block(record: InvoiceRecord) -> Optional[str]:
    address = _first(record.pickup_addresses)
    if address is None:
        return None
    lines = [address.street]
    if address.address2:
        lines.append(address.address2)
    lines.append(f"{address.city}, {address.state} {address.zip}")
    return "\n".join(lines)


def to_logistics_config(
    record: InvoiceRecord,
    payment_method: PaymentMethod | str = PaymentMethod.CASH,
) -> dict[str, Any]:
    """
    Downstream pickup config. Only the first address, pickup date and contact
    feed the generated text; the full lists stay on the record.
    """
    method = PaymentMethod.parse(payment_method) or PaymentMethod.CASH
    return {
        "vendor": record.vendor,
        "invoiceNumber": record.invoice_number,
        "invoiceDate": record.invoice_date,
        "paymentMethod": method.value,
        "emailSubject": email_subject(record),
        "pickupAddress": pickup_address_block(record),
        "pickupDate": _first(record.pickup_dates),
        "contactPhone": _first(record.contact_info.phone),
        "contactEmail": _first(record.contact_info.email),
        "lotCount": len(record.items),
        "lots": [f"{item.lot_number} - {item.description}" for item in record.items],
        "total": float(record.totals.total),
        "notes": list(record.special_notes),
    }


def format_display(record: InvoiceRecord) -> str:
    t = record.totals
    lines = [
        f"Vendor:         {record.vendor}",
        f"Invoice #:      {record.invoice_number or '-'}",
        f"Invoice date:   {record.invoice_date or '-'}",
        f"Phone:          {', '.join(record.contact_info.phone) or '-'}",
        f"Email:          {', '.join(record.contact_info.email) or '-'}",
        "Pickup addresses:",
    ]
    for a in record.pickup_addresses:
        suffix = f" ({a.address2})" if a.address2 else ""
        lines.append(f"  - {a.one_line}{suffix}")
    if not record.pickup_addresses:
        lines.append("  (none)")
    lines.append("Pickup dates:")
    lines.extend(f"  - {d}" for d in record.pickup_dates)
    if not record.pickup_dates:
        lines.append("  (none)")
    lines.append(f"Items ({len(record.items)}):")
    lines.extend(f"  {i.lot_number}: {i.description}" for i in record.items)
    lines += [
        "Totals:",
        f"  SubTotal:        {format_money(t.subtotal)}",
        f"  Buyer's premium: {format_money(t.premium)}",
        f"  Tax:             {format_money(t.tax)}",
        f"  Convenience fee: {format_money(t.convenience_fee)}",
        f"  Cash total:      {format_money(t.cash_total)}",
        f"  Credit total:    {format_money(t.credit_total)}",
        f"  TOTAL:           {format_money(t.total)}",
    ]
    if record.special_notes:
        lines.append("Notes:")
        lines.extend(f"  - {n}" for n in record.special_notes)
    return "\n".join(lines)
