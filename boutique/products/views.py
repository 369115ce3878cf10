from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from boutique.app_setup.dependencies import get_services
from boutique.app_setup.services import Services
from boutique.utils.security import require_user

router = APIRouter(prefix="/api/v1/products", tags=["Products API"], dependencies=[Depends(require_user)])

# module boutique.products.views
def _dump(products) -> Dict[str, Any]:
    return {"products": [p.model_dump(mode="json", by_alias=True) for p in products]}

@router.get("")
async def list_products(category: Optional[str] = None, q: Optional[str] = None, services: Services = Depends(get_services)):
    """
    Liste le catalogue.
    - q: recherche par préfixe de nom (prioritaire)
    - category: filtre par catégorie (vide = tout le catalogue)
    """
    catalog = services.catalog
    if q:
        return _dump(await run_in_threadpool(catalog.search_products, q))
    return _dump(await run_in_threadpool(catalog.get_products_by_category, category or ""))

@router.get("/recent")
async def recent_products(services: Services = Depends(get_services)):
    return _dump(await run_in_threadpool(services.catalog.get_recent_products))

@router.get("/categories")
async def list_categories(services: Services = Depends(get_services)):
    categories = await run_in_threadpool(services.catalog.get_categories)
    return {"categories": [c.model_dump(mode="json") for c in categories]}

@router.get("/banners")
async def list_banners(services: Services = Depends(get_services)):
    banners = await run_in_threadpool(services.catalog.get_banners)
    return {"banners": [b.model_dump(mode="json") for b in banners]}

@router.get("/{product_id}")
async def get_product(product_id: str, services: Services = Depends(get_services)):
    product = await run_in_threadpool(services.catalog.get_product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return product.model_dump(mode="json", by_alias=True)
