"""
Payment adapter abstraction.

The kiosk can take cards through Stripe (the browser confirms a server-created
PaymentIntent) or Square (the browser tokenizes the card and the server
charges the token). Both are expressed as the same two-step contract:

    handle = adapter.create_charge(amount_minor, currency, settings)
    result = adapter.complete_charge(handle, card_credential, settings)

Split Payments:
---------------
When the restaurant has connected its own processor account, the charge is
split: the restaurant receives everything except the kiosk fee, which stays
with the platform. Without a connected account the platform is merchant of
record and keeps 100% of the charge.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..services.pricing import to_minor_units
from ..services.settings_store import KioskSettings


class PaymentProvider(str, Enum):
    """Supported payment processors."""
    STRIPE = "stripe"
    SQUARE = "square"


class PaymentError(Exception):
    """
    A processor call failed.

    ``message`` is safe to show to the customer; the underlying processor
    error is chained as ``__cause__`` and logged by the adapter.
    """

    def __init__(self, message: str = "Payment processing failed"):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class FeeSplit:
    """Platform fee and where the rest of the charge goes."""
    application_fee_minor: int
    destination: str


@dataclass(frozen=True)
class ChargeHandle:
    """
    Result of create_charge.

    Attributes:
        client_handle: Secret the browser needs to finish the charge (Stripe)
        settlement_id: Processor reference, once one exists
    """
    amount_minor: int
    currency: str
    client_handle: Optional[str] = None
    settlement_id: Optional[str] = None
    split: Optional[FeeSplit] = None


@dataclass(frozen=True)
class ChargeResult:
    settlement_id: str
    status: str

    @property
    def succeeded(self) -> bool:
        return self.status.lower() in ("succeeded", "completed", "approved")


class PaymentAdapter(ABC):
    """Abstract base class for payment processors."""

    provider: PaymentProvider

    @abstractmethod
    def connected_account(self, settings: KioskSettings) -> Optional[str]:
        """Identifier of the restaurant's connected account, if any."""

    def fee_split(self, amount_minor: int, settings: KioskSettings) -> Optional[FeeSplit]:
        """
        Work out the platform fee for a charge.

        Returns None when no account is connected (platform keeps everything).
        """
        destination = self.connected_account(settings)
        if not destination:
            return None
        fee_minor = min(to_minor_units(settings.kiosk_fee), amount_minor)
        return FeeSplit(application_fee_minor=fee_minor, destination=destination)

    @abstractmethod
    def create_charge(self, amount_minor: int, currency: str, settings: KioskSettings) -> ChargeHandle:
        """Start a charge for ``amount_minor`` (cents)."""

    @abstractmethod
    def complete_charge(self, handle: ChargeHandle, card_credential: str, settings: KioskSettings) -> ChargeResult:
        """Finish a charge with the card credential (payment method id or card token)."""

    @abstractmethod
    def public_config(self, settings: KioskSettings) -> Dict[str, Any]:
        """Configuration the kiosk browser needs to render the card form."""

    @abstractmethod
    def connection_status(self, settings: KioskSettings) -> Dict[str, Any]:
        """Report whether a restaurant account is connected."""
