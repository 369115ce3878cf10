"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
"""
import stripe
from typing import Any, Dict, List, Optional
from fastapi import Request

from boutique.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET

# module boutique.payments.stripe_client
def require_stripe() -> stripe:
    """
    Prépare et retourne le module stripe prêt à l’emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échoueront côté SDK (ex: No API key provided).
    """
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def create_customer() -> Any:
    """
    Crée un client Stripe (POST /v1/customers).
    Retour: objet Stripe indexable, incluant "id" (cus_...).
    """
    require_stripe()
    return stripe.Customer.create()

def create_payment_intent(
    *,
    customer: str,
    amount: int,
    currency: str,
    payment_method_types: List[str],
    metadata: Optional[Dict[str, str]] = None,
) -> Any:
    """
    Crée un PaymentIntent (POST /v1/payment_intents).
    - amount: entier en unités mineures (centimes)
    - metadata: ex {"user_id": "..."} pour relier le webhook à la session
    Retour: objet Stripe indexable, incluant "id" et "client_secret".
    """
    require_stripe()
    return stripe.PaymentIntent.create(
        customer=customer,
        amount=amount,
        currency=currency,
        payment_method_types=payment_method_types,
        metadata=metadata or {},
    )

def retrieve_payment_intent(intent_id: str) -> Any:
    """
    Relit un PaymentIntent côté Stripe (GET /v1/payment_intents/{id}).
    Retour: objet Stripe indexable, incluant "status" (ex: "succeeded").
    """
    require_stripe()
    return stripe.PaymentIntent.retrieve(intent_id)

async def parse_event(request: Request):
    """
    Parse et valide un événement Stripe signé (webhook).
    - Lit le body brut + en-tête Stripe-Signature
    - Valide la signature via Webhook.construct_event (STRIPE_WEBHOOK_SECRET)
    Retour: l’objet event si la signature est valide.
    """
    require_stripe()
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature") or request.headers.get("Stripe-Signature")
    event = stripe.Webhook.construct_event(payload, sig_header, STRIPE_WEBHOOK_SECRET or "")
    return event
