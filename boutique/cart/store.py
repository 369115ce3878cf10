"""
Panier persistant d'une session.

Le panier est chargé en une fois depuis le stockage clé-valeur (Redis) à
l'ouverture de la session, puis réécrit en entier après chaque mutation sous
une clé unique. Les mutations sont appliquées en mémoire sur la boucle
asyncio; seule l'écriture Redis part en threadpool, sérialisée par un verrou
et toujours faite avec le dernier état. La vue en mémoire fait foi: un échec
d'écriture est journalisé et exposé via persist_failed / last_persist_error,
sans être propagé.
"""
from decimal import Decimal
from typing import List, Optional, Protocol
import asyncio
import logging

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from boutique.cart.models import AddResult, CartLine, CART_BLOB, cart_total
from boutique.products.models import Product

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Sous-ensemble de l'API redis-py utilisé par le panier."""

    def get(self, name: str): ...

    def set(self, name: str, value: str): ...


# module boutique.cart.store
class CartStore:
    def __init__(self, kv: KeyValueStore, key: str):
        self._kv = kv
        self.key = key
        self.last_persist_error: Optional[Exception] = None
        self._lines: List[CartLine] = self._load()
        self._write_lock = asyncio.Lock()

    @property
    def persist_failed(self) -> bool:
        return self.last_persist_error is not None

    def _load(self) -> List[CartLine]:
        try:
            raw = self._kv.get(self.key)
        except Exception:
            logger.exception("cart.store: lecture impossible key=%s", self.key)
            return []
        if not raw:
            return []
        try:
            return CART_BLOB.validate_json(raw)
        except ValidationError:
            logger.warning("cart.store: blob panier illisible, panier vide key=%s", self.key)
            return []

    def _write(self, blob: str) -> None:
        self._kv.set(self.key, blob)

    async def _save(self) -> None:
        async with self._write_lock:
            # Instantané pris sous le verrou: la dernière écriture porte le dernier état
            blob = CART_BLOB.dump_json(self._lines, by_alias=True).decode("utf-8")
            try:
                await run_in_threadpool(self._write, blob)
                self.last_persist_error = None
            except Exception as e:
                self.last_persist_error = e
                logger.exception("cart.store: écriture impossible key=%s lines=%s", self.key, len(self._lines))

    def _find(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self._lines if line.product.id == product_id), None)

    def get_all(self) -> List[CartLine]:
        return [line.model_copy() for line in self._lines]

    async def add(self, product: Product, quantity: int = 1) -> AddResult:
        """
        Ajoute un produit.
        - Produit déjà présent: la quantité est incrémentée (is_new_line=False).
        - Sinon: nouvelle ligne avec un identifiant frais (is_new_line=True).
        """
        if quantity < 1:
            raise ValueError("quantity doit être >= 1")
        line = self._find(product.id)
        if line is not None:
            line.quantity += quantity
            is_new = False
        else:
            self._lines.append(CartLine(product=product, quantity=quantity))
            is_new = True
        await self._save()
        return AddResult(is_new_line=is_new)

    async def remove(self, product_id: str) -> None:
        self._lines = [line for line in self._lines if line.product.id != product_id]
        await self._save()

    async def update_quantity(self, product_id: str, quantity: int) -> None:
        # Une quantité < 1 est ramenée à 1, jamais de suppression implicite
        line = self._find(product_id)
        if line is None:
            return
        line.quantity = max(1, quantity)
        await self._save()

    async def clear(self) -> None:
        self._lines = []
        await self._save()

    def total(self) -> Decimal:
        return cart_total(self._lines)

    def is_empty(self) -> bool:
        return not self._lines
