"""
Gestionnaires d’exceptions.
- HTTPException (et la taxonomie backend.utils.errors): {"detail": ...} avec le statut porté.
- InvalidStatusTransition non interceptée: 400.
- Toute autre exception: journalisée puis 500 générique, rien ne remonte au serveur ASGI.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from backend.orders.models import InvalidStatusTransition

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(InvalidStatusTransition)
    async def invalid_transition(request: Request, exc: InvalidStatusTransition):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
