"""
État du checkout: une valeur unique (phase + intent détenu + erreur + version)
et une table de transitions explicite. Toute transition absente de la table
lève InvalidTransition.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from boutique.errors import InvalidTransition
from boutique.payments.models import PaymentIntent


class CheckoutPhase(str, Enum):
    IDLE = "idle"
    INTENT_PENDING = "intent_pending"
    INTENT_READY = "intent_ready"
    AWAITING_PAYMENT_UI = "awaiting_payment_ui"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    ORDER_PENDING = "order_pending"
    ORDER_WRITTEN = "order_written"
    ORDER_WRITE_FAILED = "order_write_failed"


P = CheckoutPhase

TRANSITIONS = {
    P.IDLE: {P.INTENT_PENDING},
    P.INTENT_PENDING: {P.INTENT_PENDING, P.INTENT_READY, P.IDLE},
    P.INTENT_READY: {P.AWAITING_PAYMENT_UI, P.INTENT_PENDING, P.IDLE},
    P.AWAITING_PAYMENT_UI: {P.COMPLETED, P.FAILED, P.CANCELLED},
    P.FAILED: {P.INTENT_PENDING, P.IDLE},
    P.CANCELLED: {P.INTENT_PENDING, P.IDLE},
    P.COMPLETED: {P.ORDER_PENDING},
    P.ORDER_PENDING: {P.ORDER_WRITTEN, P.ORDER_WRITE_FAILED},
    P.ORDER_WRITE_FAILED: {P.ORDER_PENDING},
    P.ORDER_WRITTEN: {P.INTENT_PENDING, P.IDLE},
}

_KEEP = object()


@dataclass(frozen=True)
class CheckoutState:
    phase: CheckoutPhase = CheckoutPhase.IDLE
    intent: Optional[PaymentIntent] = None
    error: Optional[str] = None
    version: int = 0

    @property
    def is_ready_to_pay(self) -> bool:
        return self.phase is CheckoutPhase.INTENT_READY and self.intent is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "ready_to_pay": self.is_ready_to_pay,
            "payment_intent_id": self.intent.id if self.intent else None,
            "error": self.error,
            "version": self.version,
        }


def can_transition(current: CheckoutPhase, target: CheckoutPhase) -> bool:
    return target in TRANSITIONS.get(current, set())


def transition(state: CheckoutState, target: CheckoutPhase, *, intent=_KEEP, error=_KEEP, version=_KEEP) -> CheckoutState:
    """Retourne le nouvel état; les champs non fournis sont conservés."""
    if not can_transition(state.phase, target):
        raise InvalidTransition(state.phase.value, target.value)
    changes: Dict[str, Any] = {"phase": target}
    if intent is not _KEEP:
        changes["intent"] = intent
    if error is not _KEEP:
        changes["error"] = error
    if version is not _KEEP:
        changes["version"] = version
    return replace(state, **changes)
