# module boutique.products.models
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    """Entrée de catalogue immuable (lecture seule pour le panier et le checkout)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    category: str = ""
    name: str
    price: Decimal = Field(ge=0)
    description: str = ""
    url: str = ""  # image
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")


class Category(BaseModel):
    """Catégorie de produits affichée en vitrine (ordre croissant)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str = ""
    image_url: str = ""
    is_active: bool = True
    order: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Banner(BaseModel):
    """Bannière promotionnelle de l'accueil; link optionnel."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    description: str = ""
    image_url: str = ""
    link: Optional[str] = None
    is_active: bool = True
    order: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
