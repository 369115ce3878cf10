"""
Cas d'usage 'users': garantir une fiche client utilisable pour le paiement.
- Fiche existante: rafraîchit nom/email si besoin, complète paymentId s'il manque.
- Première connexion: crée le client Stripe puis persiste la fiche avant tout checkout.
"""
from typing import Any, Dict
import logging

from boutique.users.models import Customer

logger = logging.getLogger(__name__)

def ensure_customer(user: Dict[str, Any], *, repository, gateway) -> Customer:
    user_id = str(user.get("id") or "")
    email = user.get("email") or ""
    name = user.get("name") or ""

    existing = repository.get_customer(user_id)
    payment_id = gateway.ensure_customer_id(existing.payment_id if existing else None)

    customer = Customer(
        id=user_id,
        email=email or (existing.email if existing else ""),
        name=name or (existing.name if existing else ""),
        payment_id=payment_id,
    )
    if customer != existing:
        repository.save_customer(customer)
        logger.info("users.service: fiche client enregistrée user_id=%s", user_id)
    return customer
