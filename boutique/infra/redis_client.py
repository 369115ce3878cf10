"""
Clients Redis partagés.
- get_redis(): client synchrone pour le stockage clé-valeur du panier.
- get_async_redis(): client asyncio pour FastAPILimiter.
Les connexions sont ouvertes paresseusement au premier appel réseau.
"""
from typing import Optional
import redis
import redis.asyncio as aioredis
from boutique.config import REDIS_URL, RATE_LIMIT_REDIS_URL

_redis: Optional[redis.Redis] = None

def get_redis() -> redis.Redis:
    global _redis
    if _redis is None:
        _redis = redis.from_url(REDIS_URL, encoding="utf-8", decode_responses=True)
    return _redis

def get_async_redis() -> aioredis.Redis:
    return aioredis.from_url(RATE_LIMIT_REDIS_URL, encoding="utf-8", decode_responses=True)
