"""
Thermal receipt formatting.

Receipts are plain text laid out for a 32-column thermal printer. Item lines
put ``"<qty>x <name>"`` on the left and the line total on the right; the
summary block aligns every amount at column 23.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from .. import config

RECEIPT_WIDTH = 32
SUMMARY_AMOUNT_COLUMN = 23

HEAVY_RULE = "=" * RECEIPT_WIDTH
LIGHT_RULE = "-" * RECEIPT_WIDTH


def format_receipt_date(moment: datetime) -> str:
    """Format like ``Oct 18, 2026, 3:45 PM``."""
    hour = moment.hour % 12 or 12
    return f"{moment:%b} {moment.day}, {moment.year}, {hour}:{moment:%M} {moment:%p}"


def format_tax_label(tax_rate: float) -> str:
    return f"Tax ({tax_rate * 100:g}%):"


def format_item_line(name: str, price: float, quantity: int) -> str:
    item_total = f"{price * quantity:.2f}"
    line = f"{quantity}x {name}"
    padding = RECEIPT_WIDTH - len(line) - len(item_total) - 1
    return f"{line}{' ' * max(1, padding)}${item_total}"


def _summary_line(label: str, amount: float) -> str:
    return f"{label.ljust(SUMMARY_AMOUNT_COLUMN)}${amount:.2f}"


def generate_receipt(
    order: Dict[str, Any],
    printed_at: Optional[datetime] = None,
    restaurant_name: str = config.RESTAURANT_NAME,
    tax_rate: float = config.TAX_RATE,
) -> str:
    """
    Render a receipt for an order.

    Args:
        order: Dict with order_number, items (name/price/quantity), subtotal,
               kiosk_fee, tax, total and optional customer fields
        printed_at: Timestamp shown on the receipt (defaults to now)
        restaurant_name: Banner title
        tax_rate: Rate shown in the tax label

    Returns:
        The receipt text, newline terminated
    """
    printed_at = printed_at or datetime.now()

    lines = [
        "",
        HEAVY_RULE,
        f"    {restaurant_name.upper()}",
        "    Food Ordering Kiosk",
        HEAVY_RULE,
        "",
        f"Order #: {order['order_number']}",
        f"Date: {format_receipt_date(printed_at)}",
        "",
        f"Customer: {order.get('customer_name') or 'Guest'}",
        f"Phone: {order.get('customer_phone') or 'N/A'}",
        f"Location: {order.get('delivery_location') or 'N/A'}",
        "",
        LIGHT_RULE,
        "ITEMS:",
        LIGHT_RULE,
    ]

    for item in order.get("items") or []:
        lines.append(format_item_line(item["name"], float(item["price"]), int(item["quantity"])))

    lines += [
        "",
        LIGHT_RULE,
        _summary_line("Subtotal:", order["subtotal"]),
        _summary_line("Kiosk Fee:", order["kiosk_fee"]),
        _summary_line(format_tax_label(tax_rate), order["tax"]),
        LIGHT_RULE,
        _summary_line("TOTAL:", order["total"]),
        HEAVY_RULE,
        "        THANK YOU!",
        HEAVY_RULE,
    ]

    return "\n".join(lines) + "\n"
