"""
End-to-end pipeline: text -> vendor -> field extraction -> totals -> InvoiceRecord.
File and folder wrappers pull text through a pluggable extractor and write
one output file per invoice.
"""
from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

from loguru import logger

from .addresses import extract_addresses
from .errors import InvoiceParseError
from .export import format_display, to_json, to_logistics_config
from .extract import SUPPORTED_SUFFIXES, TextExtractor, extract_text
from .fields import (
    extract_emails,
    extract_invoice_date,
    extract_invoice_number,
    extract_phones,
    extract_pickup_dates,
    extract_special_notes,
)
from .models import ContactInfo, InvoiceRecord, PaymentMethod, ProcessedFile
from .parsers import extract_lot_items
from .totals import DEFAULT_WINDOW, AskPayment, reconcile
from .vendors import UNKNOWN_VENDOR, VendorRegistry, get_default_registry

OUTPUT_FORMATS = ("json", "display", "config")


def parse_invoice_text(
    text: str | None,
    registry: Optional[VendorRegistry] = None,
    payment_method: PaymentMethod | str = PaymentMethod.CASH,
    strict: bool = False,
    ask_payment: Optional[AskPayment] = None,
    window: int = DEFAULT_WINDOW,
) -> InvoiceRecord:
    """
    Parse raw invoice text into one InvoiceRecord.
    Empty input yields an empty-but-valid record; TotalsAmbiguous propagates in strict mode.
    """
    if not text or not text.strip():
        logger.info("No invoice text to parse, returning empty record")
        return InvoiceRecord(vendor=UNKNOWN_VENDOR)

    profile = (registry or get_default_registry()).identify(text)
    reconciled = reconcile(
        text,
        payment_method=payment_method,
        ask_payment=ask_payment,
        strict=strict,
        window=window,
    )
    record = InvoiceRecord(
        vendor=profile.name,
        invoice_number=extract_invoice_number(text),
        invoice_date=extract_invoice_date(text),
        contact_info=ContactInfo(
            phone=extract_phones(text, profile),
            email=extract_emails(text, profile),
        ),
        pickup_addresses=extract_addresses(text, profile),
        pickup_dates=extract_pickup_dates(text, profile),
        items=extract_lot_items(text),
        totals=reconciled.totals,
        special_notes=extract_special_notes(text) + reconciled.notes,
    )
    logger.info(
        "Parsed invoice",
        vendor=record.vendor,
        invoice_number=record.invoice_number,
        items=len(record.items),
        total=str(record.totals.total),
    )
    return record


def process_invoice_file(
    path: str | Path,
    extractor: Optional[TextExtractor] = None,
    **parse_options,
) -> InvoiceRecord:
    """Extract text from one document (PDF or .txt) and parse it."""
    text = extract_text(path, extractor)
    return parse_invoice_text(text, **parse_options)


def _write_output(record: InvoiceRecord, stem: str, output_path: Path, output_format: str, method) -> Path:
    if output_format == "display":
        out_file = output_path / f"{stem}_invoice.txt"
        out_file.write_text(format_display(record) + "\n", encoding="utf-8")
    elif output_format == "config":
        out_file = output_path / f"{stem}_logistics.json"
        out_file.write_text(json.dumps(to_logistics_config(record, method), indent=2, ensure_ascii=False), encoding="utf-8")
    else:
        out_file = output_path / f"{stem}_invoice.json"
        out_file.write_text(to_json(record), encoding="utf-8")
    return out_file


def _failed(doc_path: Path, output_path: Path, error: Exception) -> ProcessedFile:
    """Log the failure and write an error JSON in place of the invoice output."""
    logger.error("Failed to process invoice", file=doc_path.name, error=str(error))
    out_file = output_path / f"{doc_path.stem}_invoice.json"
    with open(out_file, "w", encoding="utf-8") as f:
        json.dump({"sourceFile": doc_path.name, "error": str(error)}, f, indent=2)
    return ProcessedFile(source_file=doc_path.name, output_file=out_file.name, error=str(error))


def _process_one(
    doc_path: Path,
    output_path: Path,
    output_format: str,
    parse_options: dict,
) -> ProcessedFile:
    """Process a single document. Used by the parallel executor."""
    try:
        record = process_invoice_file(doc_path, **parse_options)
        out_file = _write_output(
            record, doc_path.stem, output_path, output_format,
            parse_options.get("payment_method", PaymentMethod.CASH),
        )
        return ProcessedFile(source_file=doc_path.name, output_file=out_file.name, record=record)
    except (InvoiceParseError, OSError, ValueError) as e:
        return _failed(doc_path, output_path, e)


def run_on_folder(
    input_dir: str | Path,
    output_dir: str | Path,
    output_format: str = "json",
    max_workers: int = 1,
    registry: Optional[VendorRegistry] = None,
    **parse_options,
) -> list[ProcessedFile]:
    """Process every PDF/.txt in input_dir and write one output per invoice to output_dir.
    When max_workers > 1, documents are processed in parallel."""
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format {output_format!r}; expected one of {OUTPUT_FORMATS}")
    input_path = Path(input_dir)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    if not input_path.exists():
        input_path.mkdir(parents=True, exist_ok=True)
        return []

    docs = sorted(p for p in input_path.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES)
    if not docs:
        return []

    # One registry shared by every worker; it is read-only once loaded
    parse_options["registry"] = registry or get_default_registry()

    if max_workers <= 1:
        results: list[ProcessedFile] = []
        for p in docs:
            try:
                results.append(_process_one(p, output_path, output_format, parse_options))
            except Exception as e:
                results.append(_failed(p, output_path, e))
        return results

    indexed: list[Optional[ProcessedFile]] = [None] * len(docs)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_idx = {
            executor.submit(_process_one, p, output_path, output_format, parse_options): i
            for i, p in enumerate(docs)
        }
        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            try:
                indexed[idx] = future.result()
            except Exception as e:
                indexed[idx] = _failed(docs[idx], output_path, e)
    return indexed
