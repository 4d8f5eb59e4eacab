"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Crée les fichiers de données (bookings.json, stripe_events.json) s'ils sont absents.
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d’environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l’init échoue
"""
import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from pickup import config
from pickup.bookings import repository as bookings_repo
from pickup.payments import repository as events_repo

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

async def _init_rate_limiter(app: FastAPI, logger: logging.Logger) -> None:
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return
    try:
        from fastapi_limiter import FastAPILimiter

        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if not FakeRedis:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé.")
            r = FakeRedis(decode_responses=True)
        else:
            import redis.asyncio as aioredis
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            app.state.rate_limit_enabled = True
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            app.state.rate_limit_enabled = False
            logger.warning(f"Rate limiting disabled due to init error: {e}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Démarrage: fichiers de données puis rate limiting.
    - Un répertoire de données inaccessible fait échouer le démarrage (pas de mode dégradé).
    - Les logs indiquent l’état effectif du rate limiting pour observabilité.
    """
    logger = logging.getLogger("uvicorn.error")
    bookings_repo.init_store()
    events_repo.init_store()
    logger.info("Data directory ready: %s", config.DATA_DIR)

    await _init_rate_limiter(app, logger)
    if not config.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY manquant: la création de réservations échouera")
    if not config.GOOGLE_MAPS_API_KEY:
        logger.info("GOOGLE_MAPS_API_KEY absent: distance fixée à 0 (tarif de base)")

    yield
