from unittest.mock import MagicMock

from boutique.products.repository import SupabaseProductCatalog

ROWS = [
    {"id": "P", "category": "sacs", "name": "Sac cabas", "price": "10.00", "createdAt": "2025-02-01T00:00:00+00:00"},
    {"id": "Q", "category": "mugs", "name": "Mug UPHF", "price": "4.99"},
]


def _catalog(data=None, error=None):
    client = MagicMock()
    query = client.table.return_value.select.return_value
    # Chaque filtre renvoie la même requête
    for name in ("eq", "order", "limit", "ilike"):
        getattr(query, name).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data)
    return SupabaseProductCatalog(lambda: client), query


def test_get_all_products_parses_rows():
    catalog, _ = _catalog(ROWS)
    products = catalog.get_all_products()
    assert [p.id for p in products] == ["P", "Q"]
    assert str(products[1].price) == "4.99"


def test_get_recent_products_orders_by_creation_date():
    catalog, query = _catalog(ROWS)
    catalog.get_recent_products(limit=5)
    query.order.assert_called_once_with("createdAt", desc=True)
    query.limit.assert_called_once_with(5)


def test_empty_category_returns_whole_catalog():
    catalog, query = _catalog(ROWS)
    assert len(catalog.get_products_by_category("")) == 2
    query.eq.assert_not_called()

    catalog.get_products_by_category("mugs")
    query.eq.assert_called_once_with("category", "mugs")


def test_search_products_uses_prefix_pattern():
    catalog, query = _catalog(ROWS[:1])
    assert [p.id for p in catalog.search_products("sac")] == ["P"]
    query.ilike.assert_called_once_with("name", "sac%")
    assert catalog.search_products("  ") == []


def test_get_product_returns_none_when_missing():
    catalog, _ = _catalog([])
    assert catalog.get_product("X") is None
    assert catalog.get_product("") is None


def test_invalid_rows_are_skipped():
    catalog, _ = _catalog([{"id": "bad", "name": "Prix négatif", "price": -3}, ROWS[0]])
    assert [p.id for p in catalog.get_all_products()] == ["P"]


def test_backend_error_returns_empty_list():
    catalog, _ = _catalog(error=Exception("network down"))
    assert catalog.get_all_products() == []
    assert catalog.get_product("P") is None


def test_get_categories_reads_active_rows_in_display_order():
    catalog, query = _catalog([
        {"id": "c-sacs", "name": "Sacs", "order": 1},
        {"id": "bad", "order": 2},
        {"id": "c-mugs", "name": "Mugs", "order": 3, "image_url": "https://cdn.example/mugs.png"},
    ])
    client = catalog._get_client()

    categories = catalog.get_categories()

    client.table.assert_called_with("categories")
    query.eq.assert_called_once_with("is_active", True)
    query.order.assert_called_once_with("order")
    assert [c.id for c in categories] == ["c-sacs", "c-mugs"]
    assert categories[1].image_url == "https://cdn.example/mugs.png"


def test_get_banners_reads_banners_table():
    catalog, query = _catalog([{"id": "b1", "title": "Soldes", "link": "/products?category=sacs"}])
    client = catalog._get_client()

    banners = catalog.get_banners()

    client.table.assert_called_with("banners")
    query.eq.assert_called_once_with("is_active", True)
    assert banners[0].title == "Soldes"
    assert banners[0].link == "/products?category=sacs"


def test_categories_backend_error_returns_empty_list():
    catalog, _ = _catalog(error=Exception("network down"))
    assert catalog.get_categories() == []
    assert catalog.get_banners() == []
