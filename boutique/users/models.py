# module boutique.users.models
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    """Fiche client: utilisateur authentifié + identifiant client Stripe."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    email: str = ""
    name: str = ""
    payment_id: Optional[str] = Field(default=None, alias="paymentId")
