"""
Payments Infrastructure Module

Stripe payment intents and customer management for marketplace orders.
"""

from elevion.infrastructure.payments.stripe_service import (
    PaymentIntentResult,
    StripeService,
    get_stripe_service,
)

__all__ = ["PaymentIntentResult", "StripeService", "get_stripe_service"]
