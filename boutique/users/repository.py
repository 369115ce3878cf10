"""Couche d’accès aux données (Supabase) pour les fiches clients (table users)."""
from typing import Callable, Optional
import logging

from supabase import Client

from boutique.errors import CustomerStoreError
from boutique.users.models import Customer

logger = logging.getLogger(__name__)

class SupabaseCustomerRepository:
    table = "users"

    def __init__(self, get_client: Callable[[], Client]):
        self._get_client = get_client

    def get_customer(self, user_id: str) -> Optional[Customer]:
        """Fiche client par id; None si introuvable. Les erreurs d'accès sont levées."""
        try:
            res = (
                self._get_client()
                .table(self.table)
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.exception("users.repository.get_customer failed user_id=%s", user_id)
            raise CustomerStoreError(f"Lecture de la fiche client impossible: {e}") from e
        rows = res.data or []
        return Customer.model_validate(rows[0]) if rows else None

    def save_customer(self, customer: Customer) -> None:
        try:
            (
                self._get_client()
                .table(self.table)
                .upsert(customer.model_dump(by_alias=True))
                .execute()
            )
        except Exception as e:
            logger.exception("users.repository.save_customer failed user_id=%s", customer.id)
            raise CustomerStoreError(f"Enregistrement de la fiche client impossible: {e}") from e
