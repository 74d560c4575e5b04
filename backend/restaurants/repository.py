from typing import List, Optional, Dict, Any
import logging
from backend.infra.supabase_client import get_supabase, get_service_supabase

logger = logging.getLogger(__name__)

# module backend.restaurants.repository
def get_restaurant(restaurant_id: str) -> Optional[dict]:
    if not restaurant_id:
        return None
    try:
        res = (
            get_supabase()
            .table("restaurants")
            .select("*")
            .eq("id", restaurant_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("restaurants.repository.get_restaurant failed id=%s", restaurant_id)
        return None

def get_restaurant_by_owner(user_id: str) -> Optional[dict]:
    """Restaurant possédé par l'utilisateur (un seul par propriétaire)."""
    if not user_id:
        return None
    try:
        res = (
            get_supabase()
            .table("restaurants")
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("restaurants.repository.get_restaurant_by_owner failed user_id=%s", user_id)
        return None

def list_restaurants_in_city(city: str) -> List[dict]:
    """Restaurants dont la ville contient `city` (insensible à la casse)."""
    try:
        res = (
            get_supabase()
            .table("restaurants")
            .select("*")
            .ilike("city", f"%{city}%")
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("restaurants.repository.list_restaurants_in_city failed city=%s", city)
        return []

def create_restaurant(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_supabase().table("restaurants").insert(data).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("restaurants.repository.create_restaurant failed user_id=%s", data.get("user_id"))
        return None

def update_restaurant(restaurant_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            get_service_supabase()
            .table("restaurants")
            .update(data)
            .eq("id", restaurant_id)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("restaurants.repository.update_restaurant failed id=%s", restaurant_id)
        return None
