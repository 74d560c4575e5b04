"""Couche service du domaine Utilisateurs (profil de l'utilisateur connecté)."""
from typing import Any, Dict, Optional, Tuple

from backend.users import repository
from backend.users.models import serialize_user
from backend.utils.errors import NotFoundError, ServerError

def get_current_profile(user_id: str) -> Dict[str, Any]:
    row = repository.get_user_by_id(user_id)
    if not row:
        raise NotFoundError("User not found")
    return serialize_user(row)

def create_current_profile(user_id: str, email: Optional[str]) -> Tuple[bool, Optional[Dict[str, Any]]]:
    """Crée le profil si absent.
    Retour: (created, profil). created=False si le profil existait déjà (pas de corps renvoyé).
    """
    if repository.get_user_by_id(user_id):
        return False, None
    row = repository.create_user({"id": user_id, "email": email})
    if not row:
        raise ServerError("Error while creating user")
    return True, serialize_user(row)

def update_current_profile(user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    if not repository.get_user_by_id(user_id):
        raise NotFoundError("User not found")
    row = repository.update_user(user_id, {
        "name": data["name"],
        "address_line_one": data["addressLineOne"],
        "city": data["city"],
        "country": data["country"],
    })
    if not row:
        raise ServerError("Error while updating the user profile")
    return serialize_user(row)
