# module boutique.cart.models
from decimal import Decimal
from typing import List
from uuid import uuid4
from pydantic import BaseModel, Field, TypeAdapter

from boutique.products.models import Product


def new_line_id() -> str:
    return str(uuid4()).upper()


class CartLine(BaseModel):
    """Une ligne de panier: un produit et sa quantité (>= 1)."""
    id: str = Field(default_factory=new_line_id)
    product: Product
    quantity: int = Field(default=1, ge=1)

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity


class AddResult(BaseModel):
    is_new_line: bool


# Blob persisté: tableau JSON de CartLine
CART_BLOB = TypeAdapter(List[CartLine])


def cart_total(lines: List[CartLine]) -> Decimal:
    """Somme des prix * quantités; Decimal('0') pour un panier vide."""
    return sum((line.subtotal for line in lines), Decimal("0"))
