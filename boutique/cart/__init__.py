"""
Module 'cart': panier persistant (modèles, store clé-valeur, vues).
"""
from .models import CartLine, AddResult, cart_total
from .store import CartStore, KeyValueStore

__all__ = ["CartLine", "AddResult", "cart_total", "CartStore", "KeyValueStore"]
