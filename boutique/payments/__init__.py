"""
Module 'payments': point d'entrée public.
Réunit le client Stripe, la passerelle PaymentIntent et la conversion des montants.
"""

from .amounts import to_minor_units
from .gateway import StripePaymentGateway
from .models import PaymentIntent, PaymentSheetConfig, PaymentSheetContext
from .stripe_client import require_stripe, create_customer, create_payment_intent, retrieve_payment_intent, parse_event

__all__ = [
    "to_minor_units",
    "StripePaymentGateway",
    "PaymentIntent",
    "PaymentSheetConfig",
    "PaymentSheetContext",
    "require_stripe",
    "create_customer",
    "create_payment_intent",
    "retrieve_payment_intent",
    "parse_event",
]
