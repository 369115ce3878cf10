"""
Lifespan FastAPI de la boutique.

Démarrage:
- Vérifie le stockage Redis des paniers (services.kv). Injoignable, l'API reste
  servie: les paniers s'ouvrent vides et chaque écriture ratée remonte via
  persist_failed dans les réponses du panier.
- Initialise FastAPILimiter sur le client Redis asyncio de la limitation.
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: limitation désactivée (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: fakeredis à la place de RATE_LIMIT_REDIS_URL
  - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre en mémoire si l'init échoue
Arrêt:
- Journalise les sessions encore en mémoire (un checkout en cours n'y survit pas).
"""
import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter
from starlette.concurrency import run_in_threadpool

from boutique.infra.redis_client import get_async_redis

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")


async def _check_cart_store(app: FastAPI) -> None:
    services = getattr(app.state, "services", None)
    ping = getattr(getattr(services, "kv", None), "ping", None)
    if ping is None:
        return
    try:
        await run_in_threadpool(ping)
        app.state.cart_store_ready = True
        logger.info("Cart store reachable (key prefix %s)", services.cart_storage_key)
    except Exception as e:
        app.state.cart_store_ready = False
        logger.warning("Cart store unreachable, carts start empty: %s", e)


async def _init_rate_limit(app: FastAPI) -> None:
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return
    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            r = get_async_redis()
        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        # Sans fallback local, pas de 429 plutôt qu'une API indisponible
        app.state.rate_limit_enabled = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        logger.warning("Rate limiting init error (local fallback=%s): %s", app.state.rate_limit_enabled, e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await _check_cart_store(app)
    await _init_rate_limit(app)
    yield
    sessions = getattr(app.state, "sessions", None)
    if sessions is not None and len(sessions):
        logger.info("Shutdown with %s shop session(s) in memory", len(sessions))
