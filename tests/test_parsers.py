"""
Tests for the line-oriented lot item parser.
"""

from auction_invoice.parsers import extract_lot_items


def _as_pairs(items):
    return [(i.lot_number, i.description) for i in items]


def test_fixture_items(tri_state_text):
    assert _as_pairs(extract_lot_items(tri_state_text)) == [
        ("101", "Allen Bradley PLC Cabinet With PanelView 1000 Includes Assorted Spare I/O Modules"),
        ("102", "Pallet Racking, 12 Sections, 10ft Uprights"),
    ]


def test_first_lot_number_wins():
    text = (
        "12   1001  Hydraulic Press 50 Ton\n"
        "12   1002  Some Other Description Entirely\n"
    )
    assert _as_pairs(extract_lot_items(text)) == [("12", "Hydraulic Press 50 Ton")]


def test_description_length_bounds():
    text = (
        "10   1001  Too Short\n"
        "11   1002  " + "X" * 501 + "\n"
        "12   1003  Exactly Fifteen\n"
    )
    assert _as_pairs(extract_lot_items(text)) == [("12", "Exactly Fifteen")]


def test_page_furniture_rejected():
    text = (
        "20   2024  Invoice continued from previous page\n"
        "21   2024  Page header repeated on top\n"
        "22   2024  Date printed on the report\n"
    )
    assert extract_lot_items(text) == []


def test_leading_dash_and_whitespace_cleaned():
    text = "30   3001  -   Lincoln   Welder 225 Amp\n"
    assert _as_pairs(extract_lot_items(text)) == [("30", "Lincoln Welder 225 Amp")]


def test_continuation_rules():
    text = (
        "40   4001  Mig Welder On Rolling Cart\n"
        "With Gas Bottle And Regulator\n"
        "lowercase line is not a continuation\n"
        "Short\n"
        "Location: 1 Main St, Howe, IN 46746\n"
    ) + "X" * 200 + "\n"
    assert _as_pairs(extract_lot_items(text)) == [
        ("40", "Mig Welder On Rolling Cart With Gas Bottle And Regulator"),
    ]


def test_continuation_starting_with_label_word():
    text = (
        "51   5002  Surveying Equipment Lot On Pallet\n"
        "Total Station With Tripod And Case\n"
    )
    assert _as_pairs(extract_lot_items(text)) == [
        ("51", "Surveying Equipment Lot On Pallet Total Station With Tripod And Case"),
    ]


def test_blank_line_does_not_end_continuation():
    text = (
        "50   5001  Pallet Of Assorted Hand Tools\n"
        "\n"
        "Includes Socket Sets And Wrenches\n"
    )
    assert _as_pairs(extract_lot_items(text)) == [
        ("50", "Pallet Of Assorted Hand Tools Includes Socket Sets And Wrenches"),
    ]


def test_continuation_goes_to_latest_item_after_ignored_duplicate():
    text = (
        "70   7001  Forklift Propane 5000 Lb\n"
        "71   7002  Scissor Lift Electric 19ft\n"
        "70   7003  Duplicate Entry For Forklift Lot\n"
        "Battery Charger Included\n"
    )
    assert _as_pairs(extract_lot_items(text)) == [
        ("70", "Forklift Propane 5000 Lb"),
        ("71", "Scissor Lift Electric 19ft Battery Charger Included"),
    ]


def test_crlf_lines():
    text = "60   6001  Drill Press Floor Model\r\nWith Tooling Cabinet\r\n"
    assert _as_pairs(extract_lot_items(text)) == [("60", "Drill Press Floor Model With Tooling Cabinet")]


def test_empty():
    assert extract_lot_items("") == []
    assert extract_lot_items(None) == []
