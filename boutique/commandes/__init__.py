"""
Module 'commandes': registre des commandes (modèles, repository Supabase, vues).
"""
from .models import Order, ShippingAddress, new_order_id, ORDER_STATUS_PROCESSING, PAYMENT_STATUS_PAID
from .repository import SupabaseOrderLedger

__all__ = [
    "Order",
    "ShippingAddress",
    "new_order_id",
    "ORDER_STATUS_PROCESSING",
    "PAYMENT_STATUS_PAID",
    "SupabaseOrderLedger",
]
