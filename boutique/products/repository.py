"""
Accès aux données du catalogue (table 'products').
Les erreurs de lecture sont journalisées et transformées en valeurs neutres ([] / None)
afin de ne pas casser la navigation.
"""
from typing import Any, Callable, List, Optional, Type, TypeVar
import logging

from pydantic import ValidationError
from supabase import Client

from boutique.products.models import Banner, Category, Product

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10

M = TypeVar("M", Product, Category, Banner)

# module boutique.products.repository
class SupabaseProductCatalog:
    table = "products"
    categories_table = "categories"
    banners_table = "banners"

    def __init__(self, get_client: Callable[[], Client]):
        self._get_client = get_client

    def _to_models(self, model: Type[M], rows: List[dict]) -> List[M]:
        items: List[M] = []
        for row in rows or []:
            try:
                items.append(model.model_validate(row))
            except ValidationError:
                logger.warning("products.repository: ligne %s invalide ignorée id=%s", model.__name__, row.get("id"))
        return items

    def _select(self, build: Callable[[Any], Any], action: str, *, table: Optional[str] = None, model: Type[M] = Product) -> List[M]:
        try:
            query = self._get_client().table(table or self.table).select("*")
            res = build(query).execute()
            return self._to_models(model, res.data or [])
        except Exception:
            logger.exception("products.repository.%s failed", action)
            return []

    def get_recent_products(self, limit: int = RECENT_LIMIT) -> List[Product]:
        """Les produits les plus récents (tri createdAt desc)."""
        return self._select(lambda q: q.order("createdAt", desc=True).limit(limit), "get_recent_products")

    def get_products_by_category(self, category: str) -> List[Product]:
        if not category:
            return self.get_all_products()
        return self._select(lambda q: q.eq("category", category), "get_products_by_category")

    def get_all_products(self) -> List[Product]:
        return self._select(lambda q: q, "get_all_products")

    def search_products(self, name: str) -> List[Product]:
        """Recherche par préfixe de nom (insensible à la casse)."""
        name = (name or "").strip()
        if not name:
            return []
        pattern = name.replace("%", r"\%").replace("_", r"\_") + "%"
        return self._select(lambda q: q.ilike("name", pattern), "search_products")

    def get_product(self, product_id: str) -> Optional[Product]:
        if not product_id:
            return None
        found = self._select(lambda q: q.eq("id", product_id).limit(1), "get_product")
        return found[0] if found else None

    def get_categories(self) -> List[Category]:
        """Catégories actives, par ordre d'affichage."""
        return self._select(
            lambda q: q.eq("is_active", True).order("order"),
            "get_categories",
            table=self.categories_table,
            model=Category,
        )

    def get_banners(self) -> List[Banner]:
        """Bannières actives, par ordre d'affichage."""
        return self._select(
            lambda q: q.eq("is_active", True).order("order"),
            "get_banners",
            table=self.banners_table,
            model=Banner,
        )
