"""
Module 'checkout': machine à états panier -> paiement -> commande.
"""
from .orchestrator import CheckoutOrchestrator
from .results import PaymentCompleted, PaymentFailed, PaymentCancelled, PaymentResult, parse_payment_result
from .state import CheckoutPhase, CheckoutState, TRANSITIONS, can_transition, transition

__all__ = [
    "CheckoutOrchestrator",
    "PaymentCompleted",
    "PaymentFailed",
    "PaymentCancelled",
    "PaymentResult",
    "parse_payment_result",
    "CheckoutPhase",
    "CheckoutState",
    "TRANSITIONS",
    "can_transition",
    "transition",
]
