"""Endpoints du panier de l’utilisateur authentifié.
- Les handlers sont async: les mutations du panier restent sur la boucle d'événements
  (écrivain unique); la lecture du catalogue et l'écriture Redis partent en threadpool.
- Chaque réponse renvoie le panier complet et son total recalculé.
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from boutique.app_setup.dependencies import get_services, get_shop_session
from boutique.app_setup.services import Services
from boutique.cart.store import CartStore
from boutique.sessions import ShopSession
from boutique.utils.rate_limit import optional_rate_limit

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])


class AddItemRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class UpdateQuantityRequest(BaseModel):
    quantity: int


# module boutique.cart.views
def cart_payload(cart: CartStore) -> Dict[str, Any]:
    return {
        "items": [line.model_dump(mode="json", by_alias=True) for line in cart.get_all()],
        "total": str(cart.total()),
        "persist_failed": cart.persist_failed,
    }

@router.get("")
async def get_cart(session: ShopSession = Depends(get_shop_session)):
    return cart_payload(session.cart)

@router.post("/items", dependencies=[Depends(optional_rate_limit(times=60, seconds=60))])
async def add_item(
    body: AddItemRequest,
    session: ShopSession = Depends(get_shop_session),
    services: Services = Depends(get_services),
):
    """Ajoute un produit (ou incrémente sa ligne). 404 si le produit n'existe pas."""
    product = await run_in_threadpool(services.catalog.get_product, body.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    result = await session.cart.add(product, body.quantity)
    return {"is_new_line": result.is_new_line, **cart_payload(session.cart)}

@router.patch("/items/{product_id}")
async def update_quantity(product_id: str, body: UpdateQuantityRequest, session: ShopSession = Depends(get_shop_session)):
    await session.cart.update_quantity(product_id, body.quantity)
    return cart_payload(session.cart)

@router.delete("/items/{product_id}")
async def remove_item(product_id: str, session: ShopSession = Depends(get_shop_session)):
    await session.cart.remove(product_id)
    return cart_payload(session.cart)

@router.delete("")
async def clear_cart(session: ShopSession = Depends(get_shop_session)):
    await session.cart.clear()
    return cart_payload(session.cart)
