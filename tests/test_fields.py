"""
Tests for single-value and contact field extraction.
"""

from auction_invoice.fields import (
    extract_emails,
    extract_invoice_date,
    extract_invoice_number,
    extract_phones,
    extract_pickup_dates,
    extract_special_notes,
    format_phone,
    is_valid_phone,
)
from auction_invoice.vendors import UNKNOWN_PROFILE


class TestInvoiceNumber:

    def test_invoice_hash_label(self):
        assert extract_invoice_number("Invoice # : TSA-20431\nDate: 06/01/2024") == "TSA-20431"
        assert extract_invoice_number("Invoice #A-77") == "A-77"

    def test_numeric_dash_wins_over_label(self):
        text = "Invoice # : 99\nRef 2024-000123-7"
        assert extract_invoice_number(text) == "2024-000123-7"

    def test_missing(self):
        assert extract_invoice_number("No number here") is None
        assert extract_invoice_number("") is None


class TestInvoiceDate:

    def test_slash_date(self):
        assert extract_invoice_date("Date: 06/01/2024") == "06/01/2024"

    def test_invoice_date_rest_of_line(self):
        assert extract_invoice_date("Invoice Date: March 14, 2024\nNext line") == "March 14, 2024"

    def test_day_month_year_time(self):
        assert extract_invoice_date("Printed 14-Mar-2024 13:05 by cashier") == "14-Mar-2024 13:05"

    def test_slash_date_takes_precedence(self):
        text = "Invoice Date: March 14, 2024\nDate: 03/14/2024"
        assert extract_invoice_date(text) == "03/14/2024"


class TestPhones:

    def test_validity(self):
        assert is_valid_phone("614-555-1234")
        assert not is_valid_phone("100-123-4567")
        assert not is_valid_phone("614-155-1234")
        assert not is_valid_phone("61455512")

    def test_format(self):
        assert format_phone("614.555.1234") == "(614) 555-1234"
        assert format_phone("100-123-4567") is None

    def test_extract_formats_and_dedupes(self):
        text = "Phone: 614-555-1234 Fax: 100-123-4567\nAlt (614) 555-1234 / 260 555 0199"
        assert extract_phones(text, UNKNOWN_PROFILE) == ["(614) 555-1234", "(260) 555-0199"]


class TestEmails:

    def test_lowercased_and_unique(self):
        text = "Email: Settlements@TriStateAuctions.com\nor settlements@tristateauctions.com"
        assert extract_emails(text, UNKNOWN_PROFILE) == ["settlements@tristateauctions.com"]

    def test_none(self):
        assert extract_emails("no contact", UNKNOWN_PROFILE) == []


class TestPickupDates:

    def test_known_phrases(self, tri_state_text):
        dates = extract_pickup_dates(tri_state_text, UNKNOWN_PROFILE)
        assert dates[0] == "Load times for materials: Mon 6/3 thru Fri 6/7"
        assert dates[1].startswith("Payment must be received by Fri 5/31/24 at 4:00 PM")

    def test_racking_phrase_across_lines(self):
        text = "Load times for racking and equipment:\nTue 6/4 through Thu 6/6"
        assert extract_pickup_dates(text, UNKNOWN_PROFILE) == [
            "Load times for racking and equipment: Tue 6/4 through Thu 6/6"
        ]

    def test_generic_pickup_pattern(self):
        text = "Pick up dates: Sat 7/13 - Sun 7/14"
        assert extract_pickup_dates(text, UNKNOWN_PROFILE) == ["Pick up dates: Sat 7/13 - Sun 7/14"]

    def test_vendor_pattern(self, registry):
        profile = registry.get("Midwest Surplus Auction Co")
        text = "Loadout: Wed 8/7 - Thu 8/8"
        assert extract_pickup_dates(text, profile) == ["Loadout: Wed 8/7 - Thu 8/8"]

    def test_empty(self):
        assert extract_pickup_dates("", UNKNOWN_PROFILE) == []


def test_special_notes():
    text = "Note: Bring your own rigging.\nSPECIAL INSTRUCTIONS: Forklift on site\nNotes without colon"
    assert extract_special_notes(text) == ["Bring your own rigging.", "Forklift on site"]
