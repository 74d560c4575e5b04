"""
Accès aux données pour la table 'orders' (client service-role: écritures serveur et webhook).
Les transitions de statut sont des mises à jour conditionnelles: la ligne n'est modifiée
que si son statut courant est celui attendu (None retourné sinon).
"""
from typing import Any, Dict, List, Optional
import logging
from backend.infra.supabase_client import get_service_supabase

logger = logging.getLogger(__name__)

# module backend.orders.repository
def insert_order(order: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_supabase().table("orders").insert(order).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.insert_order failed id=%s", order.get("id"))
        return None

def get_order(order_id: str) -> Optional[dict]:
    if not order_id:
        return None
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select("*")
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.get_order failed id=%s", order_id)
        return None

def list_orders_for_user(user_id: str) -> List[dict]:
    """Commandes de l'utilisateur avec le restaurant joint (clé 'restaurants')."""
    if not user_id:
        return []
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select("*, restaurants(*)")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("orders.repository.list_orders_for_user failed user_id=%s", user_id)
        return []

def list_orders_for_restaurant(restaurant_id: str) -> List[dict]:
    if not restaurant_id:
        return []
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .select("*")
            .eq("restaurant_id", restaurant_id)
            .order("created_at", desc=True)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("orders.repository.list_orders_for_restaurant failed restaurant_id=%s", restaurant_id)
        return []

def mark_order_paid(order_id: str, total_amount: float) -> Optional[dict]:
    """
    placed -> paid avec le montant confirmé par Stripe, en une seule requête conditionnelle.
    - total_amount: nombre JSON (colonne numeric), 340.0 pour amount_total=34000
    - None si aucune ligne en statut 'placed' ne correspond (déjà payée, ou inconnue)
    - Les erreurs Supabase sont propagées (le webhook doit répondre non-2xx pour être rejoué)
    """
    res = (
        get_service_supabase()
        .table("orders")
        .update({"status": "paid", "total_amount": total_amount})
        .eq("id", order_id)
        .eq("status", "placed")
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def update_order_status(order_id: str, expected_status: str, new_status: str) -> Optional[dict]:
    """Change le statut seulement si le statut courant vaut expected_status."""
    try:
        res = (
            get_service_supabase()
            .table("orders")
            .update({"status": new_status})
            .eq("id", order_id)
            .eq("status", expected_status)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.update_order_status failed id=%s", order_id)
        return None
