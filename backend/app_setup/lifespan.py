"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Construit la StripeGateway depuis la configuration (app.state.payment_gateway)
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d’environnement supportées:
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive complètement (tests)
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis (tests)
  - LOCAL_RATE_LIMIT_FALLBACK=1: active un fallback local si l’init échoue
"""
import os
import logging
import redis.asyncio as aioredis
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from backend.config import load_payment_settings
from backend.payments.stripe_client import StripeGateway

async def _init_rate_limiter(app: FastAPI, logger: logging.Logger) -> None:
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        return
    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            from fakeredis.aioredis import FakeRedis
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        app.state.rate_limit_enabled = False
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
        else:
            logger.warning(f"Rate limiting disabled due to init error: {e}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Démarrage: gateway Stripe + rate limiting. Arrêt: fermeture de FastAPILimiter si actif.
    Une gateway déjà présente sur app.state (tests) n'est pas remplacée.
    """
    logger = logging.getLogger("uvicorn.error")

    if getattr(app.state, "payment_gateway", None) is None:
        settings = load_payment_settings()
        if not settings.secret_key or not settings.webhook_secret:
            logger.warning("Stripe keys missing: checkout and webhook calls will fail")
        app.state.payment_gateway = StripeGateway(settings)

    await _init_rate_limiter(app, logger)
    yield

    if getattr(app.state, "rate_limit_enabled", False):
        await FastAPILimiter.close()
