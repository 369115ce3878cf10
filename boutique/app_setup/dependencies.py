"""
Dépendances FastAPI partagées par les vues.
"""
from typing import Any, Dict
from fastapi import Depends, Request

from boutique.app_setup.services import Services
from boutique.sessions import ShopSession
from boutique.utils.security import require_user

def get_services(request: Request) -> Services:
    return request.app.state.services

def get_shop_session(request: Request, user: Dict[str, Any] = Depends(require_user)) -> ShopSession:
    """Session de l'utilisateur courant (panier + checkout), créée au premier accès."""
    return request.app.state.sessions.get(str(user["id"]))
