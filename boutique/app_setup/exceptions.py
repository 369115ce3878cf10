"""
Gestionnaires d’exceptions.
- BoutiqueError: status_code porté par l'exception, JSON {"detail", "code"}
  (+ "order_id" pour une commande payée non enregistrée).
- Les HTTPException gardent la réponse JSON standard de FastAPI.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from boutique.errors import BoutiqueError, OrderWriteError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BoutiqueError)
    async def json_boutique_error(request: Request, exc: BoutiqueError):
        content = {"detail": str(exc), "code": exc.code}
        if isinstance(exc, OrderWriteError):
            content["order_id"] = exc.order_id
        if exc.status_code >= 500:
            logger.warning("%s %s -> %s (%s)", request.method, request.url.path, exc.status_code, exc.code)
        return JSONResponse(status_code=exc.status_code, content=content)
