"""
Side-effect reporting for order creation.

Persisting the order, printing the receipt and emailing the restaurant are all
best effort: none of them can fail the customer's order. Each attempt is
reported to a ``NotificationSink`` so failures stay observable. The default
sink writes to the log; tests pass a recording sink.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class SideEffect(str, Enum):
    PERSIST = "persist"
    PRINT = "print"
    EMAIL = "email"


class SideEffectStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class SideEffectResult:
    effect: SideEffect
    order_number: str
    status: SideEffectStatus
    detail: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status == SideEffectStatus.FAILED


class NotificationSink(Protocol):
    def record(self, result: SideEffectResult) -> None:
        ...


class LoggingSink:
    """Default sink: failures at ERROR, everything else at INFO/DEBUG."""

    def record(self, result: SideEffectResult) -> None:
        if result.status == SideEffectStatus.FAILED:
            logger.error(
                "Order %s: %s failed: %s",
                result.order_number, result.effect.value, result.detail,
            )
        elif result.status == SideEffectStatus.SKIPPED:
            logger.debug(
                "Order %s: %s skipped (%s)",
                result.order_number, result.effect.value, result.detail,
            )
        else:
            logger.info("Order %s: %s succeeded", result.order_number, result.effect.value)
