"""
Résultats rapportés par l'UI de paiement: Completed | Failed(error) | Cancelled.
"""
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class PaymentCompleted:
    pass


@dataclass(frozen=True)
class PaymentFailed:
    error: str


@dataclass(frozen=True)
class PaymentCancelled:
    pass


PaymentResult = Union[PaymentCompleted, PaymentFailed, PaymentCancelled]


def parse_payment_result(status: str, error: Optional[str] = None) -> PaymentResult:
    """
    Traduit le statut brut envoyé par le client mobile.
    - "completed" / "failed" / "canceled" (ou "cancelled")
    - ValueError si statut inconnu
    """
    value = (status or "").strip().lower()
    if value == "completed":
        return PaymentCompleted()
    if value == "failed":
        return PaymentFailed(error=(error or "").strip() or "Paiement refusé")
    if value in ("canceled", "cancelled"):
        return PaymentCancelled()
    raise ValueError(f"Statut de paiement inconnu: {status!r}")
