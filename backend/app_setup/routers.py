"""
Registre central des routers (API, health).
- /api/my/user, /api/my/restaurant, /api/my/restaurant/order
- /api/restaurant, /api/order, /api/order/checkout
- /health
"""
from fastapi import FastAPI
from backend.users import views as users_views
from backend.restaurants import views as restaurants_views
from backend.orders import views as orders_views
from backend.payments import views as payments_views
from backend.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l’application.
    L’ordre n’a pas d’impact sauf conflits de chemins (évités par préfixes).
    """
    app.include_router(users_views.router)
    app.include_router(restaurants_views.my_router)
    app.include_router(orders_views.owner_router)
    app.include_router(restaurants_views.router)
    app.include_router(orders_views.router)
    app.include_router(payments_views.router)
    app.include_router(health_router)
