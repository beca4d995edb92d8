"""
Tests for thermal receipt formatting.
"""
from datetime import datetime

from kiosk_api.services.receipt import (
    RECEIPT_WIDTH,
    format_item_line,
    format_receipt_date,
    format_tax_label,
    generate_receipt,
)


PRINTED_AT = datetime(2026, 10, 18, 15, 45)

TEST_ORDER = {
    "order_number": "TEST001",
    "items": [
        {"name": "Test Item 1", "price": 10.00, "quantity": 2},
        {"name": "Test Item 2", "price": 5.50, "quantity": 1},
    ],
    "subtotal": 25.50,
    "tax": 2.35,
    "kiosk_fee": 3.00,
    "total": 30.85,
    "customer_name": "Test Customer",
    "customer_phone": "(555) 123-4567",
    "delivery_location": "Table 1",
}


def test_generate_receipt_full_layout():
    receipt = generate_receipt(TEST_ORDER, printed_at=PRINTED_AT, restaurant_name="Walter's Kitchen", tax_rate=0.0825)

    expected = "\n".join([
        "",
        "================================",
        "    WALTER'S KITCHEN",
        "    Food Ordering Kiosk",
        "================================",
        "",
        "Order #: TEST001",
        "Date: Oct 18, 2026, 3:45 PM",
        "",
        "Customer: Test Customer",
        "Phone: (555) 123-4567",
        "Location: Table 1",
        "",
        "--------------------------------",
        "ITEMS:",
        "--------------------------------",
        "2x Test Item 1            $20.00",
        "1x Test Item 2             $5.50",
        "",
        "--------------------------------",
        "Subtotal:              $25.50",
        "Kiosk Fee:             $3.00",
        "Tax (8.25%):           $2.35",
        "--------------------------------",
        "TOTAL:                 $30.85",
        "================================",
        "        THANK YOU!",
        "================================",
    ]) + "\n"
    assert receipt == expected


def test_receipt_is_deterministic():
    first = generate_receipt(TEST_ORDER, printed_at=PRINTED_AT)
    second = generate_receipt(TEST_ORDER, printed_at=PRINTED_AT)
    assert first == second


def test_missing_customer_fields_use_defaults():
    order = dict(TEST_ORDER, customer_name="", customer_phone=None)
    order.pop("delivery_location")
    receipt = generate_receipt(order, printed_at=PRINTED_AT)

    assert "Customer: Guest\n" in receipt
    assert "Phone: N/A\n" in receipt
    assert "Location: N/A\n" in receipt


def test_item_line_fills_receipt_width():
    line = format_item_line("Burger", 13.99, 1)
    assert line == "1x Burger                 $13.99"
    assert len(line) == RECEIPT_WIDTH


def test_long_item_name_keeps_one_space():
    line = format_item_line("Extra Large Family Sized Combo Platter", 49.99, 1)
    assert line.endswith(" $49.99")
    assert "  $" not in line


def test_format_receipt_date_morning_and_midnight():
    assert format_receipt_date(datetime(2026, 1, 5, 9, 7)) == "Jan 5, 2026, 9:07 AM"
    assert format_receipt_date(datetime(2026, 1, 5, 0, 30)) == "Jan 5, 2026, 12:30 AM"


def test_format_tax_label():
    assert format_tax_label(0.0825) == "Tax (8.25%):"
    assert format_tax_label(0.07) == "Tax (7%):"
