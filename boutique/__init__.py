"""
Backend de la boutique mobile: catalogue, panier, paiement Stripe et commandes.
"""

__version__ = "0.1.0"
