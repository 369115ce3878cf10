# boutique.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du backend boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe, Redis)
- Expose la configuration de la feuille de paiement (marchand, pays, moyens de paiement)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _split_env(v: str) -> list[str]:
    return [item.strip() for item in (v or "").split(",") if item.strip()]

# Supabase: URL et clés (anon/service)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON_KEY = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Stripe: clés publiques/privées et secret webhook
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")

# Feuille de paiement présentée par le client mobile
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "eur").lower()
MERCHANT_DISPLAY_NAME = _clean_env(os.getenv("MERCHANT_DISPLAY_NAME") or "UPHF Store")
DEFAULT_COUNTRY = _clean_env(os.getenv("DEFAULT_COUNTRY") or "FR").upper()
PAYMENT_METHOD_TYPES = _split_env(os.getenv("PAYMENT_METHOD_TYPES", "card")) or ["card"]

# Redis: panier (clé-valeur) et rate limiting
REDIS_URL = _clean_env(os.getenv("REDIS_URL") or "redis://127.0.0.1:6379/0")
RATE_LIMIT_REDIS_URL = _clean_env(os.getenv("RATE_LIMIT_REDIS_URL") or REDIS_URL)
CART_STORAGE_KEY = _clean_env(os.getenv("CART_STORAGE_KEY") or "cart_items")

# Sessions en mémoire: retrait après inactivité (secondes)
SESSION_IDLE_SECONDS = int(_clean_env(os.getenv("SESSION_IDLE_SECONDS") or "1800"))

# CORS / hosts
CORS_ORIGINS = _split_env(os.getenv("CORS_ORIGINS", "*"))
ALLOWED_HOSTS = _split_env(os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver"))
