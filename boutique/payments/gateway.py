"""
Passerelle vers Stripe pour réserver un paiement: création du client Stripe
(une fois par utilisateur) et d'un PaymentIntent (une fois par tentative).
Les erreurs Stripe (réseau, API, authentification) sont levées en
PaymentGatewayError; elles bloquent seulement la mise à disposition de l'UI
de paiement.
"""
from typing import Dict, List, Optional
import logging

import stripe

from boutique.errors import PaymentGatewayError
from boutique.payments import stripe_client
from boutique.payments.models import PaymentIntent

logger = logging.getLogger(__name__)

# module boutique.payments.gateway
class StripePaymentGateway:
    def __init__(self, payment_method_types: List[str]):
        self.payment_method_types = list(payment_method_types)

    def ensure_customer_id(self, existing: Optional[str]) -> str:
        """
        Retourne l'identifiant client Stripe existant, sinon en crée un.
        L'appelant doit persister un identifiant nouvellement créé avant de poursuivre.
        """
        if existing:
            return existing
        try:
            customer = stripe_client.create_customer()
        except stripe.StripeError as e:
            logger.warning("payments.gateway: création client Stripe échouée: %s", e)
            raise PaymentGatewayError(f"Création du client de paiement impossible: {e}") from e
        customer_id = customer["id"]
        logger.info("payments.gateway: client Stripe créé id=%s", customer_id)
        return customer_id

    def create_intent(
        self,
        customer_id: str,
        amount: int,
        currency: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> PaymentIntent:
        """Un appel distant: POST /v1/payment_intents {customer, amount, currency}."""
        if amount <= 0:
            raise ValueError("amount doit être > 0 (unités mineures)")
        try:
            intent = stripe_client.create_payment_intent(
                customer=customer_id,
                amount=amount,
                currency=currency,
                payment_method_types=self.payment_method_types,
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.warning("payments.gateway: création intent échouée customer=%s amount=%s: %s", customer_id, amount, e)
            raise PaymentGatewayError(f"Création de l'intent de paiement impossible: {e}") from e
        return PaymentIntent(
            id=intent["id"],
            client_secret=intent["client_secret"],
            customer_id=customer_id,
            amount=amount,
            currency=currency,
        )

    def get_intent_status(self, intent_id: str) -> str:
        """
        Statut Stripe de l'intent ("succeeded", "processing", "requires_payment_method"...).
        Seul "succeeded" atteste un paiement confirmé.
        """
        try:
            intent = stripe_client.retrieve_payment_intent(intent_id)
        except stripe.StripeError as e:
            logger.warning("payments.gateway: lecture intent impossible intent=%s: %s", intent_id, e)
            raise PaymentGatewayError(f"Vérification du paiement impossible: {e}") from e
        return str(intent["status"] or "")
