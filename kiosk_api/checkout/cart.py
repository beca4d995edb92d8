"""
Kiosk cart.

The cart lives only in the kiosk session. Each menu item appears at most once;
adding it again bumps the quantity. The unit price is captured when the item is
first added so later menu edits don't change a cart in progress.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .. import config
from ..services.pricing import PriceBreakdown, calculate_totals


@dataclass
class CartLine:
    item_id: int
    name: str
    price: float
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_order_line(self) -> Dict[str, Any]:
        return {"id": self.item_id, "name": self.name, "price": self.price, "quantity": self.quantity}


class Cart:
    def __init__(self):
        self._lines: Dict[int, CartLine] = {}

    def add_item(self, item_id: int, name: str, price: float, quantity: int = 1) -> CartLine:
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        line = self._lines.get(item_id)
        if line is None:
            line = CartLine(item_id=item_id, name=name, price=float(price), quantity=quantity)
            self._lines[item_id] = line
        else:
            line.quantity += quantity
        return line

    def update_quantity(self, item_id: int, quantity: int) -> Optional[CartLine]:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove(item_id)
            return None
        line = self._lines.get(item_id)
        if line is None:
            raise KeyError(item_id)
        line.quantity = quantity
        return line

    def remove(self, item_id: int) -> None:
        self._lines.pop(item_id, None)

    def clear(self) -> None:
        self._lines.clear()

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def totals(self, kiosk_fee: float = config.DEFAULT_KIOSK_FEE, tax_rate: float = config.TAX_RATE) -> PriceBreakdown:
        return calculate_totals(self.lines, kiosk_fee=kiosk_fee, tax_rate=tax_rate)

    def to_order_lines(self) -> List[Dict[str, Any]]:
        return [line.to_order_line() for line in self.lines]
