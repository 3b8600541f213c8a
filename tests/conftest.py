"""
Shared fixtures: sample invoice text and an isolated vendor registry.
"""

import pytest
from loguru import logger

from auction_invoice.vendors import VendorRegistry

TRI_STATE_INVOICE = """\
TRI-STATE INDUSTRIAL AUCTIONS
Invoice # : TSA-20431
Date: 06/01/2024
Phone: 614-555-1234    Fax: 100-123-4567
Office: (800) 555-0100
Email: Settlements@TriStateAuctions.com

Location: 290 West 750 North (Plant 208/209), Howe, IN 46746

SubTotal: $500.00
Convenience Fee (3%): $15.00
Cash Total Due: $500.00
Credit Total Due: $520.00

Load times for materials: Mon 6/3 thru Fri 6/7 8:00am - 4:00pm
Payment must be received by Fri 5/31/24 at 4:00 PM.
Questions? settlements@tristateauctions.com or 614.555.1234
Note: Bring your own rigging equipment.
Page 2 of 2

Lot   Code  Description
101   2001  Allen Bradley PLC Cabinet With PanelView 1000

Includes Assorted Spare I/O Modules
102   2002  - Pallet Racking, 12 Sections, 10ft Uprights
101   2003  Duplicate Lot Number Entry Should Be Ignored
103   2004  Short
"""

UNKNOWN_VENDOR_INVOICE = """\
ACME ESTATE SALES
Invoice # : A-77
Invoice Date: March 14, 2024
Location: 1200 Industrial Pkwy Angola IN 46703

SubTotal: $1,250.00
Grand Total: $1,250.00
"""


@pytest.fixture
def registry(tmp_path):
    """Registry with built-in seeds only (the store path does not exist)."""
    return VendorRegistry(tmp_path / "no_store.json")


@pytest.fixture
def tri_state_text():
    return TRI_STATE_INVOICE


@pytest.fixture
def unknown_vendor_text():
    return UNKNOWN_VENDOR_INVOICE


@pytest.fixture
def log_records():
    """Collect loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
