"""
Checkout handoff.

Builds a payment request from the cart summary, passes it to an external
payment processor and clears the cart once the processor reports the
payment as completed. Provider specifics (redirects, QR codes, banking
details) stay inside the processor.
"""
import secrets
import string
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from medcart import config
from medcart.cart import CartService, CartValidation
from medcart.errors import (
    ERROR_CART_EMPTY,
    ERROR_CART_INVALID,
    ERROR_PAYMENT_FAILED,
    ERROR_PAYMENT_METHOD_UNAVAILABLE,
    ERROR_PAYMENT_STATUS_UNKNOWN,
)
from medcart.logging import get_logger, sanitize_id_for_logging
from medcart.services.money import format_money
from .constants import FINAL_STATES, PaymentStatus
from .methods import get_payment_method
from .models import CustomerDetails, PaymentRequest, PaymentResponse

logger = get_logger(__name__)

_REFERENCE_ALPHABET = string.ascii_lowercase + string.digits


class PaymentProcessor(Protocol):
    """External payment gateway."""

    async def process_payment(self, request: PaymentRequest) -> PaymentResponse: ...

    async def check_payment_status(self, transaction_id: str) -> PaymentResponse: ...


@dataclass
class CheckoutResult:
    """Outcome of a checkout attempt."""
    response: PaymentResponse
    validation: CartValidation
    request: Optional[PaymentRequest] = None
    cart_cleared: bool = False


def _failed(message: str, reference: Optional[str] = None) -> PaymentResponse:
    return PaymentResponse(
        success=False,
        message=message,
        reference=reference,
        status=PaymentStatus.FAILED,
    )


class CheckoutService:
    """
    Hands the cart over to a payment processor.

    Validation findings are advisory by default; pass block_on_issues=True
    to refuse checkout while validate_cart() reports anything.
    """

    def __init__(
        self,
        cart: CartService,
        processor: PaymentProcessor,
        reference_prefix: str = config.REFERENCE_PREFIX,
        return_url: Optional[str] = config.RETURN_URL,
        notify_url: Optional[str] = config.NOTIFY_URL,
    ):
        self.cart = cart
        self.processor = processor
        self.reference_prefix = reference_prefix
        self.return_url = return_url
        self.notify_url = notify_url

    def generate_reference(self) -> str:
        """Unique payment reference: PREFIX-<epoch ms>-<9 random chars>."""
        suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(9))
        return f"{self.reference_prefix}-{int(time.time() * 1000)}-{suffix}"

    def build_payment_request(
        self,
        customer: CustomerDetails,
        payment_method_id: str,
        reference: Optional[str] = None,
    ) -> PaymentRequest:
        summary = self.cart.get_cart_summary()
        return PaymentRequest(
            amount=summary.total,
            reference=reference or self.generate_reference(),
            description=(
                f"MedLynx order: {summary.total_items} items "
                f"({format_money(summary.total, config.CURRENCY)})"
            ),
            customer_email=customer.email,
            customer_name=customer.name,
            customer_phone=customer.phone,
            payment_method_id=payment_method_id,
            return_url=self.return_url,
            notify_url=self.notify_url,
        )

    async def begin_checkout(
        self,
        customer: CustomerDetails,
        payment_method_id: str,
        block_on_issues: bool = False,
    ) -> CheckoutResult:
        validation = self.cart.validate_cart()

        if not self.cart.get_items():
            return CheckoutResult(response=_failed(ERROR_CART_EMPTY), validation=validation)

        if block_on_issues and not validation.valid:
            logger.info(f"Checkout blocked by {len(validation.issues)} cart issues")
            return CheckoutResult(response=_failed(ERROR_CART_INVALID), validation=validation)

        summary = self.cart.get_cart_summary()
        method = get_payment_method(payment_method_id)
        if method is None or not method.accepts(summary.total):
            logger.info(
                f"Payment method {sanitize_id_for_logging(payment_method_id)} "
                f"unavailable for {summary.total}"
            )
            return CheckoutResult(
                response=_failed(ERROR_PAYMENT_METHOD_UNAVAILABLE),
                validation=validation,
            )

        request = self.build_payment_request(customer, payment_method_id)

        try:
            response = await self.processor.process_payment(request)
        except Exception as e:
            logger.error(f"Payment processing error for {request.reference}: {e}", exc_info=True)
            return CheckoutResult(
                response=_failed(ERROR_PAYMENT_FAILED, request.reference),
                validation=validation,
                request=request,
            )

        logger.info(
            f"Payment {request.reference} via {method.id}: "
            f"status={response.status.value}, amount={request.amount}"
        )

        cart_cleared = await self._clear_if_completed(response)
        return CheckoutResult(
            response=response,
            validation=validation,
            request=request,
            cart_cleared=cart_cleared,
        )

    async def confirm_payment(self, transaction_id: str) -> PaymentResponse:
        """Poll the processor for a pending payment; clears the cart once completed."""
        try:
            response = await self.processor.check_payment_status(transaction_id)
        except Exception as e:
            logger.error(
                f"Error checking payment status for {sanitize_id_for_logging(transaction_id)}: {e}",
                exc_info=True,
            )
            return _failed(ERROR_PAYMENT_STATUS_UNKNOWN)

        if response.status.value not in FINAL_STATES:
            logger.debug(f"Payment {sanitize_id_for_logging(transaction_id)} still {response.status.value}")

        await self._clear_if_completed(response)
        return response

    async def _clear_if_completed(self, response: PaymentResponse) -> bool:
        if response.success and response.status == PaymentStatus.COMPLETED:
            await self.cart.clear_cart()
            return True
        return False
