# module boutique.payments.models
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class PaymentIntent(BaseModel):
    """Intent Stripe à usage unique: secret client + identifiant client Stripe."""
    model_config = ConfigDict(frozen=True)

    id: str
    client_secret: str
    customer_id: str
    amount: int
    currency: str


class PaymentSheetConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    publishable_key: str = ""
    merchant_display_name: str
    default_country: str
    payment_method_order: List[str]


class PaymentSheetContext(BaseModel):
    """Ce que l'UI de paiement reçoit pour confirmer l'intent."""
    client_secret: str
    customer_id: str
    payment_intent_id: str
    config: PaymentSheetConfig
    error: Optional[str] = None
