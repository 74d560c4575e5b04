"""
Middlewares transverses de l’application.
- register_basic_middlewares: CORS, TrustedHost et confiance en X-Forwarded-*.
- register_security_middleware: en-têtes de sécurité (API JSON uniquement).
- register_force_https_middleware: force la redirection HTTPS (utile derrière proxy).
Notes:
- L’ordre d’ajout est important: le middleware HTTPS est ajouté en dernier pour s’exécuter en premier.
- Aucun middleware ne lit le body: le webhook Stripe reçoit les octets exacts envoyés.
"""
from fastapi import Request, FastAPI
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from backend.config import COOKIE_SECURE, CORS_ORIGINS, ALLOWED_HOSTS, FORWARDED_ALLOW_IPS

def register_basic_middlewares(app: FastAPI) -> None:
    """
    - CORSMiddleware: autorise les origines définies (front Vite en dev).
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    - ProxyHeadersMiddleware: x-forwarded-* lus seulement depuis FORWARDED_ALLOW_IPS
      (sinon un client choisit son IP et contourne le rate limiting).
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=ALLOWED_HOSTS + ["*"] if "*" in CORS_ORIGINS else ALLOWED_HOSTS,
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=FORWARDED_ALLOW_IPS)

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")
        return response

def register_force_https_middleware(app: FastAPI) -> None:
    """Redirige HTTP -> HTTPS lorsqu’un proxy place x-forwarded-proto=http."""
    @app.middleware("http")
    async def force_https(request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "http":
            url = str(request.url.replace(scheme="https"))
            return RedirectResponse(url, status_code=301)
        return await call_next(request)
