"""Pydantic models exchanged with the payment processor."""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from medcart.services.money import to_cents

from .constants import PaymentMethodType, PaymentStatus


class PaymentMethod(BaseModel):
    """A payment option shown at checkout."""
    id: str
    name: str
    type: PaymentMethodType
    description: str
    icon: str
    processing_time: str
    is_available: bool = True
    provider_logo: Optional[str] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None

    def accepts(self, amount: Decimal) -> bool:
        """Whether this method can take a payment of `amount`."""
        if not self.is_available:
            return False
        if self.min_amount is not None and amount < self.min_amount:
            return False
        if self.max_amount is not None and amount > self.max_amount:
            return False
        return True


class CustomerDetails(BaseModel):
    """Contact fields forwarded to the processor."""
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str = ""


class PaymentRequest(BaseModel):
    """Request handed to the payment processor."""
    amount: Decimal = Field(ge=0)
    reference: str
    description: str
    customer_email: str
    customer_name: str
    customer_phone: str = ""
    payment_method_id: str
    return_url: Optional[str] = None
    notify_url: Optional[str] = None

    @property
    def amount_cents(self) -> int:
        """Amount in integer cents, for processors that take minor units."""
        return to_cents(self.amount)


class PaymentResponse(BaseModel):
    """Processor response."""
    success: bool
    transaction_id: Optional[str] = None
    payment_url: Optional[str] = None
    message: str
    reference: Optional[str] = None
    status: PaymentStatus
