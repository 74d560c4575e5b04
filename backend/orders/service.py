"""Couche service des commandes (hors paiement).
- Historique des commandes du client connecté
- Suivi des commandes côté propriétaire du restaurant (liste, avancement du statut)
"""
from typing import Any, Dict, List
import logging

from backend.orders import repository
from backend.orders.models import (
    OWNER_SETTABLE,
    InvalidStatusTransition,
    OrderStatus,
    advance_status,
    serialize_order,
)
from backend.restaurants import repository as restaurants_repository
from backend.restaurants.models import serialize_restaurant
from backend.utils.errors import BadRequestError, ConflictError, NotFoundError, ServerError, UnauthorizedError

logger = logging.getLogger(__name__)

def current_status(order: Dict[str, Any]) -> OrderStatus:
    """Statut stocké de la commande; ServerError si la valeur est hors OrderStatus (ligne corrompue)."""
    try:
        return OrderStatus(order.get("status"))
    except ValueError:
        logger.error("orders.status unknown value order_id=%s status=%r", order.get("id"), order.get("status"))
        raise ServerError("Order has an unknown status")

def list_my_orders(user_id: str) -> List[Dict[str, Any]]:
    orders = []
    for row in repository.list_orders_for_user(user_id):
        restaurant = row.get("restaurants")
        orders.append(serialize_order(row, serialize_restaurant(restaurant) if restaurant else None))
    return orders

def list_restaurant_orders(owner_id: str) -> List[Dict[str, Any]]:
    restaurant = restaurants_repository.get_restaurant_by_owner(owner_id)
    if not restaurant:
        raise NotFoundError("User restaurant not found")
    serialized = serialize_restaurant(restaurant)
    return [serialize_order(row, serialized) for row in repository.list_orders_for_restaurant(restaurant["id"])]

def update_status_as_owner(owner_id: str, order_id: str, target: OrderStatus) -> Dict[str, Any]:
    """
    Le propriétaire fait avancer une commande payée (inProgress, outForDelivery, delivered).
    - 404: commande inconnue
    - 403: la commande appartient à un autre restaurant
    - 400: statut réservé au paiement ou transition refusée par advance_status
    - 409: le statut a changé entre la lecture et l'écriture
    - 500: statut stocké inconnu
    """
    order = repository.get_order(order_id)
    if not order:
        raise NotFoundError("Order not found")

    restaurant = restaurants_repository.get_restaurant(order.get("restaurant_id"))
    if not restaurant or str(restaurant.get("user_id")) != str(owner_id):
        raise UnauthorizedError("Order does not belong to your restaurant")

    if target not in OWNER_SETTABLE:
        raise BadRequestError(f"Status '{target.value}' cannot be set manually")
    status = current_status(order)
    try:
        advance_status(status, target)
    except InvalidStatusTransition as e:
        raise BadRequestError(str(e))

    updated = repository.update_order_status(order_id, order["status"], target.value)
    if not updated:
        raise ConflictError("Order status changed, please reload")
    logger.info("orders.status order_id=%s %s -> %s", order_id, order["status"], target.value)
    return serialize_order(updated, serialize_restaurant(restaurant))
