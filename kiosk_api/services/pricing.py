"""
Order pricing.

The kiosk charges a flat kiosk fee on every order, and tax is computed on the
subtotal *plus* the kiosk fee. Amounts are kept unrounded until they are
serialized or converted to the processor's minor units.
"""

from dataclasses import dataclass
from typing import Any, Iterable

from .. import config


def round_money(amount: float) -> float:
    """Round to 2 decimal places for currency."""
    return round(amount, 2)


def to_minor_units(amount: float) -> int:
    """Convert a dollar amount to cents for the payment processor."""
    return int(round(amount * 100))


def _line_value(line: Any, name: str) -> Any:
    if isinstance(line, dict):
        return line[name]
    return getattr(line, name)


@dataclass(frozen=True)
class PriceBreakdown:
    """Unrounded order totals."""

    subtotal: float
    kiosk_fee: float
    tax: float
    total: float

    @property
    def amount_minor_units(self) -> int:
        """Amount sent to the payment processor."""
        return to_minor_units(self.total)

    def rounded(self) -> dict[str, float]:
        return {
            "subtotal": round_money(self.subtotal),
            "kiosk_fee": round_money(self.kiosk_fee),
            "tax": round_money(self.tax),
            "total": round_money(self.total),
        }


def calculate_subtotal(lines: Iterable[Any]) -> float:
    return sum(
        float(_line_value(line, "price")) * int(_line_value(line, "quantity"))
        for line in lines
    )


def calculate_totals(
    lines: Iterable[Any],
    kiosk_fee: float = config.DEFAULT_KIOSK_FEE,
    tax_rate: float = config.TAX_RATE,
) -> PriceBreakdown:
    """
    Price a cart.

    Args:
        lines: Cart lines, either objects or dicts with ``price`` and ``quantity``
        kiosk_fee: Flat fee added to every order
        tax_rate: Tax rate applied to subtotal + kiosk fee

    Returns:
        PriceBreakdown with unrounded subtotal, kiosk_fee, tax and total
    """
    subtotal = calculate_subtotal(lines)
    tax = (subtotal + kiosk_fee) * tax_rate
    return PriceBreakdown(
        subtotal=subtotal,
        kiosk_fee=kiosk_fee,
        tax=tax,
        total=subtotal + kiosk_fee + tax,
    )
