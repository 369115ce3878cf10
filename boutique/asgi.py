"""
ASGI entrypoint: expose `app` for process managers / deployments.

- En production, un process manager (ex: gunicorn/uvicorn-workers) importe `boutique.asgi:app`.
  Les sessions (panier, checkout) vivent dans le processus: un worker par utilisateur.
- Toute la configuration FastAPI est centralisée dans boutique.app_setup.factory.
"""

from boutique.app import app

__all__ = ["app"]
