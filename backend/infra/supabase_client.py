"""
Clients Supabase partagés (créés à la première utilisation).
- anon: lectures publiques (restaurants, profils) et auth.get_user des tokens
- service-role: écritures serveur (commandes, webhook Stripe, restaurants, Storage)
"""
from typing import Optional
from supabase import create_client, Client
from backend.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY, STORAGE_BUCKET

_clients: dict[str, Client] = {}

def _client(role: str, key: Optional[str]) -> Client:
    if not SUPABASE_URL or not key:
        raise RuntimeError(f"Supabase {role} client is not configured (SUPABASE_URL / key missing)")
    if role not in _clients:
        _clients[role] = create_client(SUPABASE_URL, key)
    return _clients[role]

def get_supabase() -> Client:
    return _client("anon", SUPABASE_ANON)

def get_service_supabase() -> Client:
    """Bypass RLS: réservé aux opérations déjà autorisées côté API."""
    return _client("service", SUPABASE_SERVICE_KEY)

def get_storage_bucket():
    """Bucket des images de restaurants (STORAGE_BUCKET)."""
    return get_service_supabase().storage.from_(STORAGE_BUCKET)
