"""
Factory d’application: ordonne les étapes d’initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares
from .exceptions import register_exception_handlers
from .routers import register_routers
from .services import Services, make_session_factory
from boutique.sessions import SessionRegistry

def create_app(services: Services) -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      - les services explicites (Redis, Stripe, Supabase) et le registre des sessions
      - middlewares de base, gestionnaires d’exceptions, routers
    Retour:
      FastAPI prêt à être utilisé par le serveur ASGI.
    """
    app = FastAPI(title="Boutique API", lifespan=lifespan)
    app.state.services = services
    app.state.sessions = SessionRegistry(make_session_factory(services), idle_seconds=services.session_idle_seconds)
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
