"""
Registre des commandes (table 'orders'), en ajout seul, interrogé par utilisateur.
- Lecture: erreurs journalisées, liste vide en retour.
- Écriture: une seule insertion par commande; tout échec est levé en OrderWriteError
  (l'atomicité du document est déléguée à la base).
"""
from typing import Callable, List
import logging

from pydantic import ValidationError
from supabase import Client

from boutique.commandes.models import Order
from boutique.errors import OrderWriteError

logger = logging.getLogger(__name__)

# module boutique.commandes.repository
class SupabaseOrderLedger:
    table = "orders"

    def __init__(self, get_client: Callable[[], Client]):
        self._get_client = get_client

    def get_orders(self, user_id: str) -> List[Order]:
        if not user_id:
            return []
        try:
            res = (
                self._get_client()
                .table(self.table)
                .select("*")
                .eq("userId", user_id)
                .execute()
            )
        except Exception:
            logger.exception("commandes.repository.get_orders failed user_id=%s", user_id)
            return []
        orders: List[Order] = []
        for row in res.data or []:
            try:
                orders.append(Order.model_validate(row))
            except ValidationError:
                logger.warning("commandes.repository: document commande illisible id=%s", row.get("id"))
        return orders

    def write_order(self, order: Order) -> None:
        try:
            (
                self._get_client()
                .table(self.table)
                .insert(order.to_document())
                .execute()
            )
        except Exception as e:
            logger.exception("commandes.repository.write_order failed order_id=%s user_id=%s", order.id, order.user_id)
            raise OrderWriteError(f"Enregistrement de la commande impossible: {e}", order_id=order.id) from e
        logger.info("commandes.repository: commande écrite order_id=%s user_id=%s total=%s", order.id, order.user_id, order.total)
