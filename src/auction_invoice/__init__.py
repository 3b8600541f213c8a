"""
Auction invoice pipeline: invoice text -> vendor detection -> field extraction ->
totals reconciliation -> structured record for pickup logistics.
"""

from .errors import NoExtractableText, TotalsAmbiguous
from .models import Address, InvoiceRecord, LotItem, PaymentMethod, Totals
from .pipeline import parse_invoice_text, process_invoice_file, run_on_folder
from .totals import reconcile_totals
from .vendors import VendorRegistry, identify_vendor

__version__ = "0.1.0"
__all__ = [
    "parse_invoice_text",
    "process_invoice_file",
    "run_on_folder",
    "reconcile_totals",
    "VendorRegistry",
    "identify_vendor",
    "InvoiceRecord",
    "Address",
    "LotItem",
    "Totals",
    "PaymentMethod",
    "TotalsAmbiguous",
    "NoExtractableText",
]
