"""
Payment and settings schemas.

Request/response models for the processor endpoints (Stripe payment intents,
Square card payments, merchant connection) and the admin settings endpoints.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PaymentIntentCreate(BaseModel):
    """POST /api/create-payment-intent. ``amount`` is in dollars."""
    amount: float = Field(gt=0)
    currency: str = "usd"


class PaymentIntentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(serialization_alias="clientSecret")
    payment_intent_id: str = Field(serialization_alias="paymentIntentId")


class SquarePaymentCreate(BaseModel):
    """POST /api/square/payment. ``source_id`` is the Web Payments SDK card token."""
    model_config = ConfigDict(populate_by_name=True)

    source_id: str = Field(alias="sourceId", min_length=1)
    amount: float = Field(gt=0)
    currency: str = "USD"


class SquarePaymentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    payment_id: str = Field(serialization_alias="paymentId")
    status: Optional[str] = None


class StripeConnectRequest(BaseModel):
    return_url: str


class SettingUpdate(BaseModel):
    value: Optional[Union[str, int, float]] = None

    def as_text(self) -> Optional[str]:
        return None if self.value is None else str(self.value)


class SettingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    setting_key: str
    setting_value: Optional[str] = None
