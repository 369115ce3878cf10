"""Endpoints du checkout (panier -> paiement -> commande).
- /prepare: garantit la fiche client Stripe puis prépare un PaymentIntent pour le panier.
- /payment-sheet: remet {client_secret, config} à l'UI de paiement du client mobile.
- /result: point d'entrée unique du résultat de l'UI (completed / failed / canceled);
  "completed" n'est accepté que si Stripe confirme l'intent au statut "succeeded".
- /finalize/retry: réécrit une commande payée dont l'enregistrement a échoué.
- /webhook: filet de sécurité Stripe (payment_intent.succeeded) si le client disparaît après paiement.
Codes d'erreur: 400 non prêt, 402 paiement non confirmé, 409 transition interdite, 503 passerelle indisponible,
500 commande payée non enregistrée (order_id fourni).
"""
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from boutique.app_setup.dependencies import get_services, get_shop_session
from boutique.app_setup.services import Services
from boutique.checkout.results import PaymentCompleted, parse_payment_result
from boutique.commandes.models import ShippingAddress
from boutique.errors import InvalidTransition, StalePaymentResult
from boutique.payments import stripe_client
from boutique.sessions import ShopSession
from boutique.users.service import ensure_customer
from boutique.utils.rate_limit import optional_rate_limit
from boutique.utils.security import require_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])


class PrepareRequest(BaseModel):
    address: Optional[ShippingAddress] = None


class PaymentResultRequest(BaseModel):
    status: str
    error: Optional[str] = None
    payment_intent_id: Optional[str] = None


# module boutique.checkout.views
def checkout_payload(session: ShopSession) -> Dict[str, Any]:
    checkout = session.checkout
    payload = checkout.state.to_dict()
    payload["total"] = str(session.cart.total())
    payload["pending_order_id"] = checkout.pending_order.id if checkout.pending_order else None
    payload["order"] = checkout.last_order.to_document() if checkout.last_order else None
    return payload

@router.get("")
async def get_checkout(session: ShopSession = Depends(get_shop_session)):
    return checkout_payload(session)

@router.post("/prepare", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def prepare_checkout(
    body: PrepareRequest,
    user: Dict[str, Any] = Depends(require_user),
    session: ShopSession = Depends(get_shop_session),
    services: Services = Depends(get_services),
):
    """
    Prépare le paiement du panier courant.
    - La fiche client (identifiant Stripe) est créée et persistée au besoin avant l'intent.
    - 503 si Stripe est indisponible: l'appel peut être relancé tel quel.
    """
    customer = await run_in_threadpool(ensure_customer, user, repository=services.customers, gateway=services.gateway)
    await session.checkout.prepare(customer, body.address)
    return checkout_payload(session)

@router.post("/payment-sheet")
async def payment_sheet(session: ShopSession = Depends(get_shop_session)):
    context = session.checkout.present()
    return context.model_dump(mode="json")

@router.post("/result")
async def payment_result(body: PaymentResultRequest, session: ShopSession = Depends(get_shop_session)):
    try:
        result = parse_payment_result(body.status, body.error)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    await session.checkout.on_payment_result(result, intent_id=body.payment_intent_id)
    return checkout_payload(session)

@router.post("/finalize/retry")
async def retry_finalize(session: ShopSession = Depends(get_shop_session)):
    await session.checkout.retry_finalize()
    return checkout_payload(session)

@router.post("/reset")
async def reset_checkout(session: ShopSession = Depends(get_shop_session)):
    session.checkout.reset()
    return checkout_payload(session)

@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request):
    """
    Webhook Stripe: seul payment_intent.succeeded est consommé.
    - Signature: stripe_client.parse_event (Stripe-Signature + STRIPE_WEBHOOK_SECRET)
    - Session: retrouvée via metadata.user_id de l'intent (aucune session créée ici)
    - Livré comme Completed uniquement si l'orchestrateur attend ce même intent;
      sinon {"status": "ignored"} (le client mobile a déjà rapporté le résultat).
    """
    try:
        event = await stripe_client.parse_event(request)
    except Exception:
        logger.exception("Erreur webhook_stripe")
        raise HTTPException(status_code=400, detail="Invalid Stripe webhook payload")

    if (event or {}).get("type") != "payment_intent.succeeded":
        return JSONResponse({"status": "ignored"})
    intent = ((event.get("data") or {}).get("object")) or {}
    user_id = (intent.get("metadata") or {}).get("user_id")
    session = request.app.state.sessions.peek(str(user_id)) if user_id else None
    if session is None:
        return JSONResponse({"status": "ignored"})
    try:
        await session.checkout.on_payment_result(PaymentCompleted(), intent_id=intent.get("id"), verified=True)
    except (InvalidTransition, StalePaymentResult):
        return JSONResponse({"status": "ignored"})
    logger.info("checkout.webhook: commande finalisée via webhook user_id=%s intent=%s", user_id, intent.get("id"))
    return JSONResponse({"status": "ok"})
