import os

# Pas de Redis réel pour FastAPILimiter pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import threading
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Generator, List, Optional

import fakeredis
import pytest
from fastapi.testclient import TestClient

from boutique.app_setup.factory import create_app
from boutique.app_setup.services import Services
from boutique.cart.store import CartStore
from boutique.checkout.orchestrator import CheckoutOrchestrator
from boutique.commandes.models import Order
from boutique.errors import OrderWriteError, PaymentGatewayError
from boutique.payments.models import PaymentIntent, PaymentSheetConfig
from boutique.products.models import Banner, Category, Product
from boutique.users.models import Customer
from boutique.utils.security import require_user

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


# --- Faux collaborateurs (Stripe, Supabase) ---

class FakeGateway:
    """Passerelle Stripe en mémoire; fail=True simule Stripe hors ligne."""

    def __init__(self):
        self.fail = False
        self.customers_created = 0
        # Statut Stripe par intent; "succeeded" sauf mention contraire
        self.statuses: Dict[str, str] = {}
        self.status_checks: List[str] = []
        self.intents: List[PaymentIntent] = []
        self.metadata: List[Optional[Dict[str, str]]] = []
        self._lock = threading.Lock()

    def ensure_customer_id(self, existing: Optional[str]) -> str:
        if existing:
            return existing
        if self.fail:
            raise PaymentGatewayError("Stripe hors ligne")
        self.customers_created += 1
        return f"cus_test_{self.customers_created}"

    def create_intent(self, customer_id, amount, currency, metadata=None) -> PaymentIntent:
        if self.fail:
            raise PaymentGatewayError("Stripe hors ligne")
        with self._lock:
            n = len(self.intents) + 1
            intent = PaymentIntent(
                id=f"pi_{n}",
                client_secret=f"pi_{n}_secret_{n}",
                customer_id=customer_id,
                amount=amount,
                currency=currency,
            )
            self.intents.append(intent)
            self.metadata.append(metadata)
        return intent

    def get_intent_status(self, intent_id: str) -> str:
        if self.fail:
            raise PaymentGatewayError("Stripe hors ligne")
        self.status_checks.append(intent_id)
        return self.statuses.get(intent_id, "succeeded")


class FakeLedger:
    """Registre de commandes en mémoire; fail=True simule Supabase injoignable."""

    def __init__(self):
        self.fail = False
        self.write_calls = 0
        self.orders: Dict[str, Order] = {}

    def write_order(self, order: Order) -> None:
        self.write_calls += 1
        if self.fail:
            raise OrderWriteError("Supabase injoignable", order_id=order.id)
        self.orders[order.id] = order

    def get_orders(self, user_id: str) -> List[Order]:
        return [o for o in self.orders.values() if o.user_id == user_id]


class FakeCatalog:
    def __init__(self, products: List[Product], categories=None, banners=None):
        self.products = {p.id: p for p in products}
        self.categories = list(categories or [])
        self.banners = list(banners or [])

    def get_categories(self):
        return sorted((c for c in self.categories if c.is_active), key=lambda c: c.order)

    def get_banners(self):
        return sorted((b for b in self.banners if b.is_active), key=lambda b: b.order)

    def get_product(self, product_id):
        return self.products.get(product_id)

    def get_all_products(self):
        return list(self.products.values())

    def get_recent_products(self, limit: int = 10):
        return sorted(self.products.values(), key=lambda p: p.created_at, reverse=True)[:limit]

    def get_products_by_category(self, category):
        if not category:
            return self.get_all_products()
        return [p for p in self.products.values() if p.category == category]

    def search_products(self, name):
        return [p for p in self.products.values() if p.name.lower().startswith(name.lower())]


class FakeCustomers:
    def __init__(self):
        self.rows: Dict[str, Customer] = {}
        self.saves = 0

    def get_customer(self, user_id):
        return self.rows.get(user_id)

    def save_customer(self, customer):
        self.saves += 1
        self.rows[customer.id] = customer


# --- Fixtures ---

@pytest.fixture
def product_p() -> Product:
    return Product(id="P", category="sacs", name="Sac cabas", price=Decimal("10.00"),
                   createdAt=datetime(2025, 2, 1, tzinfo=timezone.utc))

@pytest.fixture
def product_q() -> Product:
    return Product(id="Q", category="mugs", name="Mug UPHF", price=Decimal("4.99"),
                   createdAt=datetime(2025, 2, 10, tzinfo=timezone.utc))

@pytest.fixture
def kv():
    return fakeredis.FakeRedis(decode_responses=True)

@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()

@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()

@pytest.fixture
def customers() -> FakeCustomers:
    return FakeCustomers()

@pytest.fixture
def catalog(product_p, product_q) -> FakeCatalog:
    categories = [
        Category(id="c-mugs", name="Mugs", order=2),
        Category(id="c-sacs", name="Sacs", order=1),
        Category(id="c-old", name="Archives", is_active=False),
    ]
    banners = [Banner(id="b1", title="Soldes d'hiver", image_url="https://cdn.example/soldes.png", link="/products?category=sacs")]
    return FakeCatalog([product_p, product_q], categories=categories, banners=banners)

@pytest.fixture
def sheet_config() -> PaymentSheetConfig:
    return PaymentSheetConfig(
        publishable_key="pk_test_123",
        merchant_display_name="UPHF Store",
        default_country="FR",
        payment_method_order=["card"],
    )

@pytest.fixture
def cart(kv) -> CartStore:
    return CartStore(kv, "cart_items:test-user")

@pytest.fixture
def customer() -> Customer:
    return Customer(id="test-user", email="test@example.com", name="Test User", payment_id="cus_test")

@pytest.fixture
def orchestrator(cart, gateway, ledger, sheet_config) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(cart=cart, gateway=gateway, ledger=ledger, currency="eur", sheet_config=sheet_config)

@pytest.fixture
def services(kv, gateway, ledger, catalog, customers, sheet_config) -> Services:
    return Services(
        kv=kv,
        gateway=gateway,
        ledger=ledger,
        catalog=catalog,
        customers=customers,
        sheet_config=sheet_config,
        currency="eur",
        cart_storage_key="cart_items",
    )

@pytest.fixture
def fake_user() -> Dict[str, Any]:
    return {"id": "test-user", "email": "test@example.com", "name": "Test User"}

@pytest.fixture
def app(services, fake_user):
    application = create_app(services)
    # Simuler un utilisateur authentifié pour les endpoints protégés
    application.dependency_overrides[require_user] = lambda: fake_user
    return application

@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
