# module boutique.commandes.models
"""Modèles des commandes: adresse de livraison et commande figée."""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List
from uuid import uuid4
from pydantic import BaseModel, ConfigDict, Field

from boutique.cart.models import CartLine

ORDER_STATUS_PROCESSING = "En cours de traitement"
PAYMENT_STATUS_PAID = "Payé"


def new_order_id() -> str:
    # 12 derniers caractères d'un UUID, en majuscules
    return uuid4().hex[-12:].upper()


class ShippingAddress(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    full_name: str = Field(default="", alias="fullName")
    address: str = ""
    city: str = ""
    postal_code: str = Field(default="", alias="postalCode")


class Order(BaseModel):
    """Commande persistée, immuable une fois écrite."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    cart: List[CartLine]
    total: Decimal
    order_status: str = Field(default=ORDER_STATUS_PROCESSING, alias="statut")
    payment_status: str = Field(default=PAYMENT_STATUS_PAID, alias="statutPayment")
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress, alias="address")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")

    def to_document(self) -> Dict[str, Any]:
        """Document stocké: {id, userId, cart, total, statut, statutPayment, address, createdAt}."""
        return self.model_dump(mode="json", by_alias=True)
