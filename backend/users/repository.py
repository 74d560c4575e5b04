"""Couche d’accès aux données (Supabase) pour le domaine Utilisateurs.
Lectures: exceptions « catchées » et transformées en valeurs neutres (None).
Écritures: None en cas d'échec, la vue décide du statut HTTP.
"""
from typing import Any, Dict, Optional
import logging
from backend.infra.supabase_client import get_supabase, get_service_supabase

logger = logging.getLogger(__name__)

def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l’utilisateur depuis supabase.auth.get_user(access_token)."""
    res = get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
        }
    return user or {}

def get_user_by_id(user_id: str) -> Optional[dict]:
    """Profil applicatif (table users) ou None si introuvable/erreur."""
    if not user_id:
        return None
    try:
        res = get_supabase().table("users").select("*").eq("id", user_id).limit(1).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("users.repository.get_user_by_id failed id=%s", user_id)
        return None

def create_user(data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_supabase().table("users").insert(data).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("users.repository.create_user failed id=%s", data.get("id"))
        return None

def update_user(user_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = get_service_supabase().table("users").update(data).eq("id", user_id).execute()
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("users.repository.update_user failed id=%s", user_id)
        return None
