"""
Totals reconciliation.

Amounts are captured with a label-window search: find a known label, then
look for a "$0.00" token only within the next `window` characters, so an
amount from an unrelated column further down the page is never picked up.
Relationship rules then settle one authoritative total:

    Cash   = SubTotal
    Credit = SubTotal + Convenience Fee

Strict mode refuses to guess and raises TotalsAmbiguous instead.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Optional

from loguru import logger

from .errors import TotalsAmbiguous
from .models import PaymentMethod, Totals
from .money import find_amount, format_money, near_equal
from .normalize import normalize

DEFAULT_WINDOW = 80
ZERO = Decimal("0.00")

AskPayment = Callable[[], Optional[str]]

LABELS: dict[str, re.Pattern] = {
    "subtotal": re.compile(r"Sub\s?Total:", re.I),
    "cash_total": re.compile(r"Cash\s+Total\s+Due:", re.I),
    "convenience_fee": re.compile(r"Convenience\s+Fee", re.I),
    "credit_total": re.compile(r"Credit\s+Total\s+Due:", re.I),
    "grand_total": re.compile(r"Grand\s+Total:", re.I),
    "tax": re.compile(r"Sales\s+Tax:?|\bTax:", re.I),
    "premium": re.compile(r"Buyer'?s\s+Premium:?|\bPremium:", re.I),
}


@dataclass(frozen=True)
class CapturedAmounts:
    """Raw label-window captures, before any relationship rule is applied."""
    subtotal: Optional[Decimal] = None
    cash_total: Optional[Decimal] = None
    convenience_fee: Optional[Decimal] = None
    credit_total: Optional[Decimal] = None
    grand_total: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    premium: Optional[Decimal] = None


@dataclass(frozen=True)
class ReconcileResult:
    totals: Totals
    payment_method: PaymentMethod
    notes: list[str] = field(default_factory=list)


def amount_after_label(flat: str, label: re.Pattern, window: int = DEFAULT_WINDOW) -> Optional[Decimal]:
    """First dollar amount within `window` chars after the first occurrence of label."""
    m = label.search(flat)
    if not m:
        return None
    return find_amount(flat[m.end():m.end() + window])


def capture_amounts(raw_text: str | None, window: int = DEFAULT_WINDOW) -> CapturedAmounts:
    flat = normalize(raw_text)
    return CapturedAmounts(**{
        name: amount_after_label(flat, pattern, window) for name, pattern in LABELS.items()
    })


def _choose_method(
    preference: PaymentMethod | str,
    ask_payment: Optional[AskPayment],
    cash: Optional[Decimal],
    credit: Optional[Decimal],
) -> PaymentMethod:
    method = PaymentMethod.parse(preference) or PaymentMethod.CASH
    # Only worth asking when there is a real choice to make
    if ask_payment is None or cash is None or credit is None:
        return method
    answer = ask_payment()
    if answer is None:
        return method
    chosen = PaymentMethod.parse(answer)
    if chosen is None:
        logger.warning("Ignoring unrecognized payment method answer", answer=answer, keeping=method.value)
        return method
    return chosen


def _strict_total(cap: CapturedAmounts, method: PaymentMethod) -> Decimal:
    subtotal, fee = cap.subtotal, cap.convenience_fee
    if subtotal is None:
        raise TotalsAmbiguous("SubTotal not found; strict totals require it", label="SubTotal")

    if method is PaymentMethod.CREDIT:
        if fee is not None:
            computed = subtotal + fee
            if cap.credit_total is not None and not near_equal(computed, cap.credit_total):
                raise TotalsAmbiguous(
                    f"Credit Total Due {format_money(cap.credit_total)} disagrees with "
                    f"SubTotal + Convenience Fee {format_money(computed)}",
                    label="Credit Total Due", expected=computed, found=cap.credit_total,
                )
            total = computed
        elif cap.credit_total is None:
            raise TotalsAmbiguous(
                "Credit selected but neither a Convenience Fee nor a Credit Total Due was found",
                label="Credit Total Due",
            )
        else:
            total = cap.credit_total
    else:
        cash = cap.cash_total
        if cash is not None and not near_equal(cash, subtotal):
            if near_equal(cash, fee):
                raise TotalsAmbiguous(
                    f"Ambiguous layout: Cash Total Due {format_money(cash)} equals the Convenience Fee, "
                    f"expected SubTotal {format_money(subtotal)}",
                    label="Cash Total Due", expected=subtotal, found=cash,
                )
            raise TotalsAmbiguous(
                f"Cash Total Due {format_money(cash)} disagrees with SubTotal {format_money(subtotal)}",
                label="Cash Total Due", expected=subtotal, found=cash,
            )
        total = subtotal

    if total < subtotal and not near_equal(total, subtotal):
        raise TotalsAmbiguous(
            f"{method.value} total {format_money(total)} is below SubTotal {format_money(subtotal)}",
            label="SubTotal", expected=subtotal, found=total,
        )
    return total


def reconcile(
    raw_text: str | None,
    payment_method: PaymentMethod | str = PaymentMethod.CASH,
    ask_payment: Optional[AskPayment] = None,
    strict: bool = False,
    window: int = DEFAULT_WINDOW,
) -> ReconcileResult:
    """
    Resolve the authoritative total for an invoice.

    Non-strict callers always get a result; anomalies are corrected, logged as
    warnings and described in `notes`. Strict callers get a validated total or
    a TotalsAmbiguous error naming the conflicting label and values.
    """
    cap = capture_amounts(raw_text, window)
    notes: list[str] = []
    subtotal, fee = cap.subtotal, cap.convenience_fee
    cash, credit = cap.cash_total, cap.credit_total

    if subtotal is not None:
        if cash is None:
            cash = subtotal
        elif near_equal(cash, fee) and not near_equal(cash, subtotal):
            notes.append(
                f"Cash Total Due {format_money(cash)} matched the Convenience Fee; "
                f"using SubTotal {format_money(subtotal)}"
            )
            logger.warning("Cash total looks like a misaligned fee column", cash=str(cash), subtotal=str(subtotal))
            cash = subtotal
        elif cash < subtotal and not near_equal(cash, subtotal):
            notes.append(
                f"Cash Total Due {format_money(cash)} was below SubTotal; using SubTotal {format_money(subtotal)}"
            )
            logger.warning("Cash total below subtotal", cash=str(cash), subtotal=str(subtotal))
            cash = subtotal
        if fee is not None:
            # Arithmetic beats a label-window capture whenever the fee is known
            credit = subtotal + fee
    if fee is None and cap.grand_total is not None and credit is None and cash is None:
        cash = cap.grand_total

    method = _choose_method(payment_method, ask_payment, cash, credit)

    if strict:
        total = _strict_total(cap, method)
    else:
        if method is PaymentMethod.CREDIT:
            total = credit if credit is not None else cash
        else:
            total = cash
        if total is None:
            total = ZERO
        if subtotal is not None and total < subtotal and not near_equal(total, subtotal):
            notes.append(f"{method.value} total {format_money(total)} was below SubTotal; clamped to {format_money(subtotal)}")
            logger.warning("Total below subtotal, clamping", total=str(total), subtotal=str(subtotal))
            total = subtotal
            cash = subtotal

    totals = Totals(
        subtotal=subtotal,
        tax=cap.tax,
        premium=cap.premium,
        total=total,
        cash_total=cash,
        credit_total=credit,
        convenience_fee=fee,
    )
    logger.debug("Totals reconciled", method=method.value, strict=strict, total=str(total))
    return ReconcileResult(totals=totals, payment_method=method, notes=notes)


def reconcile_totals(
    raw_text: str | None,
    payment_method: PaymentMethod | str = PaymentMethod.CASH,
    ask_payment: Optional[AskPayment] = None,
    strict: bool = False,
    window: int = DEFAULT_WINDOW,
) -> Totals:
    return reconcile(raw_text, payment_method, ask_payment, strict, window).totals
