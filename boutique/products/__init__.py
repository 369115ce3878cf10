"""
Module 'products': catalogue en lecture seule (modèle, repository Supabase, vues).
"""
from .models import Banner, Category, Product
from .repository import SupabaseProductCatalog

__all__ = ["Banner", "Category", "Product", "SupabaseProductCatalog"]
