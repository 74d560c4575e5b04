from fastapi import Request, Response, HTTPException
import hashlib
import logging
import os
import time

from backend.utils.security import COOKIE_NAME

logger = logging.getLogger(__name__)

def _caller_key(req: Request) -> str:
    # Priorité: token (hashé, Bearer ou cookie) puis IP, toujours suffixé du chemin
    auth = req.headers.get("Authorization", "")
    token = auth[7:].strip() if auth.startswith("Bearer ") else req.cookies.get(COOKIE_NAME)
    path = req.url.path
    if token:
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"user:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance de limitation de débit.
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (app.state)
    - sinon fastapi-limiter (Redis) si initialisé par le lifespan
    - désactivée si app.state.rate_limit_enabled est False
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _caller_key(request)
            store = getattr(request.app.state, "_rl_store", {})
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            request.app.state._rl_store = store
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _caller_key(req)

        try:
            await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            # Redis indisponible: pas de 429, on laisse passer
            logger.warning("rate limiter unavailable for %s", request.url.path)
    return _dep
