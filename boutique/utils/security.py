from fastapi import Request, HTTPException, Depends
from typing import Dict, Any, Optional
import logging

from boutique.infra import supabase_client

logger = logging.getLogger(__name__)

def bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None

def build_user_dict(user) -> Dict[str, Any]:
    metadata = getattr(user, "user_metadata", None) or {}
    return {
        "id": getattr(user, "id", None),
        "email": getattr(user, "email", None) or "",
        "name": metadata.get("full_name") or metadata.get("name") or "",
    }

def get_current_user(request: Request) -> Dict[str, Any]:
    """
    Résout l'utilisateur Supabase à partir du jeton Bearer envoyé par l'app mobile.
    - 401 si jeton absent, invalide ou expiré.
    """
    token = bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Non authentifié")
    try:
        res = supabase_client.get_supabase().auth.get_user(token)
        user = build_user_dict(getattr(res, "user", None))
    except Exception:
        logger.info("security.get_current_user: jeton refusé")
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    if not user.get("id"):
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    return user

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user
