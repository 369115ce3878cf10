"""
Registre central des routers (API v1, health).
- API v1: products, cart, checkout, commandes
- Health: health_router
"""
from fastapi import FastAPI
from boutique.products import views as products_views
from boutique.cart import views as cart_views
from boutique.checkout import views as checkout_views
from boutique.commandes import views as commandes_views
from boutique.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(products_views.router)
    app.include_router(cart_views.router)
    app.include_router(checkout_views.router)
    app.include_router(commandes_views.router)
    # Health & monitoring
    app.include_router(health_router)
