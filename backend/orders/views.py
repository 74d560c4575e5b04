# module backend.orders.views

"""Endpoints Commandes.
- /api/order: historique du client connecté (restaurant joint)
- /api/my/restaurant/order: commandes reçues par le restaurant du propriétaire connecté
- /api/my/restaurant/order/{id}/status: avancement du statut par le propriétaire
La création de commande passe par le checkout (backend.payments.views).
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends

from backend.orders import service as orders_service
from backend.orders.models import UpdateOrderStatusRequest
from backend.utils.security import require_user

router = APIRouter(prefix="/api/order", tags=["Orders API"])
owner_router = APIRouter(prefix="/api/my/restaurant/order", tags=["My Restaurant API"])

@router.get("")
def get_my_orders(user: Dict[str, Any] = Depends(require_user)):
    return orders_service.list_my_orders(user["id"])

@owner_router.get("")
def get_my_restaurant_orders(user: Dict[str, Any] = Depends(require_user)):
    return orders_service.list_restaurant_orders(user["id"])

@owner_router.patch("/{order_id}/status")
def update_order_status(order_id: str, body: UpdateOrderStatusRequest, user: Dict[str, Any] = Depends(require_user)):
    return orders_service.update_status_as_owner(user["id"], order_id, body.status)
