#!/usr/bin/env python3
"""
Auction invoice pipeline - CLI entry point.

Usage:
  python run.py                                   # Process ./input, JSON to ./output
  python run.py --input Invoices --output ./output
  python run.py --format config --payment Credit  # Logistics config, credit totals
  python run.py --strict                          # Fail invoices with ambiguous totals
  python run.py --ask-payment                     # Prompt for Cash/Credit when both totals exist

Drop PDFs (or already-extracted .txt files) into the input folder and run to
generate one structured output file per invoice.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from auction_invoice.config import load_settings
from auction_invoice.models import PaymentMethod
from auction_invoice.pipeline import OUTPUT_FORMATS, run_on_folder
from auction_invoice.vendors import VendorRegistry


def ask_payment_on_terminal() -> Optional[str]:
    """Prompt callback; blank input, EOF or Ctrl-C keeps the configured method."""
    try:
        answer = input("Both cash and credit totals found. Pay by [C]ash or c[R]edit? ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        return None
    if answer in ("c", "cash"):
        return PaymentMethod.CASH.value
    if answer in ("r", "credit"):
        return PaymentMethod.CREDIT.value
    return None


def main() -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(
        description="Extract pickup logistics and reconciled totals from auction invoices."
    )
    parser.add_argument(
        "--input",
        "-i",
        type=str,
        default="./input",
        help="Input directory containing invoice PDFs or .txt files (default: ./input)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="./output",
        help="Output directory (default: ./output)",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Output shape: full JSON record, readable text, or logistics config (default: json)",
    )
    parser.add_argument(
        "--payment",
        choices=[m.value for m in PaymentMethod],
        default=settings.payment_method.value,
        help=f"Payment method used to pick the total (default: {settings.payment_method.value})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict_totals,
        help="Reject invoices whose totals are ambiguous or conflicting",
    )
    parser.add_argument(
        "--ask-payment",
        action="store_true",
        help="Prompt for Cash/Credit when an invoice has both totals (forces sequential processing)",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=settings.totals_window,
        metavar="N",
        help=f"Characters scanned after each totals label (default: {settings.totals_window})",
    )
    parser.add_argument(
        "--patterns",
        type=str,
        default=str(settings.patterns_path),
        help="Vendor pattern store (JSON). Built-in vendors are used when it is missing",
    )
    parser.add_argument(
        "--parallel",
        "-j",
        type=int,
        default=1,
        metavar="N",
        help="Process N documents in parallel (default: 1)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging",
    )
    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else settings.log_level)

    input_path = Path(args.input)
    output_path = Path(args.output)

    if not input_path.exists():
        input_path.mkdir(parents=True, exist_ok=True)
        print(f"Created input directory: {input_path.absolute()}. Add invoices and run again.")
        return

    results = run_on_folder(
        input_path,
        output_path,
        output_format=args.format,
        max_workers=1 if args.ask_payment else max(1, args.parallel),
        registry=VendorRegistry(args.patterns),
        payment_method=args.payment,
        strict=args.strict,
        ask_payment=ask_payment_on_terminal if args.ask_payment else None,
        window=max(1, args.window),
    )

    failed = [r for r in results if r.error]
    print(f"Processed {len(results)} invoice(s). Output in: {output_path.absolute()}")
    for r in results:
        if r.error:
            print(f"  - {r.source_file}: ERROR {r.error}")
        else:
            print(f"  - {r.source_file}: {len(r.record.items)} lots, total {r.record.totals.total}")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
