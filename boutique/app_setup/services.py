"""
Racine de composition: construit explicitement les collaborateurs (Redis,
Stripe, Supabase) et les transmet à create_app(). Les tests fournissent
leurs propres Services.
"""
from dataclasses import dataclass
from typing import Any, Callable

from boutique import config
from boutique.cart.store import CartStore, KeyValueStore
from boutique.checkout.orchestrator import CheckoutOrchestrator
from boutique.commandes.repository import SupabaseOrderLedger
from boutique.infra.redis_client import get_redis
from boutique.infra.supabase_client import get_service_supabase, get_supabase
from boutique.payments.gateway import StripePaymentGateway
from boutique.payments.models import PaymentSheetConfig
from boutique.products.repository import SupabaseProductCatalog
from boutique.sessions import ShopSession
from boutique.users.repository import SupabaseCustomerRepository


@dataclass
class Services:
    kv: KeyValueStore
    gateway: Any
    ledger: Any
    catalog: Any
    customers: Any
    sheet_config: PaymentSheetConfig
    currency: str = "eur"
    cart_storage_key: str = "cart_items"
    session_idle_seconds: float = 1800


def build_services() -> Services:
    """Services de production, lus depuis boutique.config (connexions paresseuses)."""
    return Services(
        kv=get_redis(),
        gateway=StripePaymentGateway(payment_method_types=config.PAYMENT_METHOD_TYPES),
        ledger=SupabaseOrderLedger(get_service_supabase),
        catalog=SupabaseProductCatalog(get_supabase),
        customers=SupabaseCustomerRepository(get_service_supabase),
        sheet_config=PaymentSheetConfig(
            publishable_key=config.STRIPE_PUBLIC_KEY,
            merchant_display_name=config.MERCHANT_DISPLAY_NAME,
            default_country=config.DEFAULT_COUNTRY,
            payment_method_order=config.PAYMENT_METHOD_TYPES,
        ),
        currency=config.PAYMENT_CURRENCY,
        cart_storage_key=config.CART_STORAGE_KEY,
        session_idle_seconds=config.SESSION_IDLE_SECONDS,
    )


def make_session_factory(services: Services) -> Callable[[str], ShopSession]:
    def _factory(user_id: str) -> ShopSession:
        cart = CartStore(services.kv, f"{services.cart_storage_key}:{user_id}")
        checkout = CheckoutOrchestrator(
            cart=cart,
            gateway=services.gateway,
            ledger=services.ledger,
            currency=services.currency,
            sheet_config=services.sheet_config,
        )
        return ShopSession(user_id=user_id, cart=cart, checkout=checkout)
    return _factory
