"""
Exceptions métier de la boutique.
Chaque erreur porte un status_code HTTP et un code stable, traduits en JSON
par boutique.app_setup.exceptions.
"""
from typing import Optional


class BoutiqueError(Exception):
    status_code = 500
    code = "boutique_error"


class CheckoutNotReady(BoutiqueError):
    """Préconditions du checkout non remplies (client absent, panier vide...)."""
    status_code = 400
    code = "checkout_not_ready"


class InvalidTransition(BoutiqueError):
    status_code = 409
    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        super().__init__(f"Transition interdite: {current} -> {target}")
        self.current = current
        self.target = target


class StalePaymentResult(BoutiqueError):
    """Résultat de paiement rapporté pour un intent qui n'est plus le courant."""
    status_code = 409
    code = "stale_payment_result"


class PaymentNotConfirmed(BoutiqueError):
    """Résultat "completed" rapporté par le client mais intent non réglé côté Stripe."""
    status_code = 402
    code = "payment_not_confirmed"

    def __init__(self, intent_id: str, status: str):
        super().__init__(f"Paiement non confirmé par Stripe: intent {intent_id} au statut {status!r}")
        self.intent_id = intent_id
        self.status = status


class FinalizeInProgress(BoutiqueError):
    status_code = 409
    code = "finalize_in_progress"


class PaymentGatewayError(BoutiqueError):
    """Échec transitoire côté Stripe (réseau, création client/intent)."""
    status_code = 503
    code = "payment_gateway_error"


class OrderWriteError(BoutiqueError):
    """
    Écriture de commande échouée APRÈS un paiement confirmé.
    Distincte d'un échec de paiement: le client a été débité.
    """
    status_code = 500
    code = "order_write_failed"

    def __init__(self, message: str, order_id: Optional[str] = None):
        super().__init__(message)
        self.order_id = order_id


class CustomerStoreError(BoutiqueError):
    status_code = 503
    code = "customer_store_error"
