"""
Stripe Payment Service

Infrastructure service for marketplace payments: payment intents for
orders and customer lookup/creation. The Stripe SDK is synchronous; the
async methods keep the call sites uniform with the rest of the stack.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

import stripe
from stripe import StripeError

from elevion.config.settings import get_settings
from elevion.infrastructure.exceptions import ConfigurationError, PaymentServiceError


logger = logging.getLogger(__name__)


# Currencies Stripe charges in whole units
ZERO_DECIMAL_CURRENCIES = frozenset({
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
})


@dataclass
class PaymentIntentResult:
    """What callers need from a created payment intent."""
    id: str
    client_secret: str
    amount: int
    currency: str


def to_minor_units(amount: Decimal, currency: str) -> int:
    """Convert a major-unit amount (e.g. 19.99 USD) to Stripe's smallest unit (1999)."""
    amount = Decimal(str(amount))
    if currency.lower() in ZERO_DECIMAL_CURRENCIES:
        return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeService:
    """
    Stripe payment processing service.

    Without a secret key the service reports `is_configured == False`
    and callers skip payment creation.
    """

    def __init__(self, api_key: Optional[str] = None, default_currency: Optional[str] = None):
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.stripe_secret_key
        self._default_currency = default_currency or settings.stripe_default_currency

        if self._api_key:
            stripe.api_key = self._api_key

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    # =========================================================================
    # Payment Intents
    # =========================================================================

    async def create_payment_intent(
        self,
        amount: Decimal,
        currency: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> PaymentIntentResult:
        """
        Create a payment intent for a one-off charge.

        Args:
            amount: Amount in major currency units
            currency: ISO currency code, defaults to the configured one
            metadata: Free-form key/value pairs stored on the intent

        Returns:
            PaymentIntentResult with the client secret for the frontend
        """
        if not self.is_configured:
            raise ConfigurationError(
                "Stripe is not configured",
                missing_keys=["STRIPE_SECRET_KEY"],
            )

        currency = (currency or self._default_currency).lower()
        minor_amount = to_minor_units(amount, currency)

        try:
            intent = stripe.PaymentIntent.create(
                amount=minor_amount,
                currency=currency,
                metadata=metadata or {},
                automatic_payment_methods={"enabled": True},
            )
            logger.info(f"Created payment intent {intent.id} for {minor_amount} {currency}")
            return PaymentIntentResult(
                id=intent.id,
                client_secret=intent.client_secret,
                amount=minor_amount,
                currency=currency,
            )

        except StripeError as e:
            logger.error(f"Failed to create payment intent: {e}")
            raise PaymentServiceError(
                f"Failed to create payment: {e.user_message}",
                operation="create_payment_intent",
                original_error=e,
            )

    # =========================================================================
    # Customer Management
    # =========================================================================

    async def create_customer(self, user_id: int, email: str) -> stripe.Customer:
        try:
            customer = stripe.Customer.create(
                email=email,
                metadata={"user_id": str(user_id), "source": "elevion"},
            )
            logger.info(f"Created Stripe customer {customer.id} for user {user_id}")
            return customer

        except StripeError as e:
            logger.error(f"Failed to create Stripe customer: {e}")
            raise PaymentServiceError(
                f"Failed to create customer: {e.user_message}",
                operation="create_customer",
                original_error=e,
            )

    async def get_or_create_customer(
        self,
        user_id: int,
        email: str,
        existing_customer_id: Optional[str] = None,
    ) -> stripe.Customer:
        """
        Get existing customer or create new one.

        A deleted or unknown existing customer is replaced by a new one.
        """
        if existing_customer_id:
            try:
                customer = stripe.Customer.retrieve(existing_customer_id)
                if not customer.get("deleted"):
                    return customer
            except StripeError:
                logger.warning(f"Customer {existing_customer_id} not found, creating new")

        return await self.create_customer(user_id, email)


# =============================================================================
# Singleton Instance (Dependency Injection Ready)
# =============================================================================

_stripe_service_instance: Optional[StripeService] = None


def get_stripe_service() -> StripeService:
    """Get or create Stripe service singleton."""
    global _stripe_service_instance

    if _stripe_service_instance is None:
        _stripe_service_instance = StripeService()

    return _stripe_service_instance
