# module boutique.commandes.views

"""Historique des commandes de l’utilisateur authentifié (tri createdAt décroissant)."""
from typing import Any, Dict
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from boutique.app_setup.dependencies import get_services
from boutique.app_setup.services import Services
from boutique.utils.security import require_user

router = APIRouter(prefix="/api/v1/commandes", tags=["Commandes API"])


@router.get("")
async def list_commandes(user: Dict[str, Any] = Depends(require_user), services: Services = Depends(get_services)):
    orders = await run_in_threadpool(services.ledger.get_orders, str(user["id"]))
    orders = sorted(orders, key=lambda o: o.created_at, reverse=True)
    return {"commandes": [o.to_document() for o in orders]}
