"""
Construction de l’application FastAPI (utilisée par backend.app et les tests).
Ordonne les étapes d’initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware, register_force_https_middleware
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      1) middlewares de base (CORS, TrustedHost, proxy headers)
      2) en-têtes de sécurité
      3) gestionnaires d’exceptions
      4) tous les routers (API, health)
      5) redirection HTTPS, ajoutée en dernier pour s’exécuter en premier
    """
    app = FastAPI(title="Food Ordering API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    register_force_https_middleware(app)
    return app
