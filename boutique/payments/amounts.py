"""
Conversion montant décimal -> unités mineures (centimes) pour Stripe.
"""
from decimal import Decimal, ROUND_HALF_UP

# Devises Stripe sans décimales: le montant est transmis tel quel
ZERO_DECIMAL_CURRENCIES = frozenset({
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
})

def to_minor_units(amount: Decimal, currency: str = "eur") -> int:
    """
    Convertit un total décimal en entier d'unités mineures.
    - Arrondi au plus proche (half-up), jamais de troncature (10.005 -> 1001).
    - Refuse les montants négatifs.
    """
    value = Decimal(str(amount))
    if value < 0:
        raise ValueError("Montant négatif")
    factor = 1 if (currency or "").lower() in ZERO_DECIMAL_CURRENCIES else 100
    return int((value * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
