"""Couche service du domaine Restaurants.
Rôles:
- Gérer le restaurant du propriétaire connecté (lecture, création unique, mise à jour).
- Recherche publique par ville avec filtres cuisines / texte, tri et pagination.
"""
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from backend.infra.storage import upload_image
from backend.restaurants import repository
from backend.restaurants.models import RestaurantForm, serialize_restaurant, to_row
from backend.utils.errors import BadRequestError, ConflictError, NotFoundError, ServerError

PAGE_SIZE = 10

SORT_OPTIONS = {"lastUpdated", "deliveryPrice", "estimatedDeliveryTime", "restaurantName"}

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def get_my_restaurant(user_id: str) -> Dict[str, Any]:
    row = repository.get_restaurant_by_owner(user_id)
    if not row:
        raise NotFoundError("User restaurant not found")
    return serialize_restaurant(row)

def create_my_restaurant(user_id: str, form: RestaurantForm, image: Optional[tuple[bytes, str]]) -> Dict[str, Any]:
    """Crée le restaurant du propriétaire.
    - 409 si l'utilisateur en possède déjà un
    - image obligatoire: (contenu, content_type)
    """
    if repository.get_restaurant_by_owner(user_id):
        raise ConflictError("User restaurant already exists")
    if not image:
        raise BadRequestError("Image file is required")

    data = to_row(form)
    data["image_url"] = upload_image(*image)
    data["user_id"] = user_id
    data["last_updated"] = _now()

    row = repository.create_restaurant(data)
    if not row:
        raise ServerError("Error while creating the user restaurant")
    return serialize_restaurant(row)

def update_my_restaurant(user_id: str, form: RestaurantForm, image: Optional[tuple[bytes, str]]) -> Dict[str, Any]:
    """Remplace les champs éditables; l'image n'est ré-uploadée que si fournie."""
    existing = repository.get_restaurant_by_owner(user_id)
    if not existing:
        raise NotFoundError("User restaurant not found")

    data = to_row(form)
    data["last_updated"] = _now()
    if image:
        data["image_url"] = upload_image(*image)

    row = repository.update_restaurant(existing["id"], data)
    if not row:
        raise ServerError("Error while updating the user restaurant")
    return serialize_restaurant(row)

def get_restaurant(restaurant_id: str) -> Dict[str, Any]:
    row = repository.get_restaurant(restaurant_id)
    if not row:
        raise NotFoundError("Restaurant not found")
    return serialize_restaurant(row)

def filter_restaurants(
    restaurants: List[Dict[str, Any]],
    search_query: str = "",
    selected_cuisines: str = "",
) -> List[Dict[str, Any]]:
    """
    Filtre des restaurants sérialisés (fonction pure).
    - selected_cuisines "a,b": chaque cuisine demandée doit correspondre à au moins une cuisine du restaurant
    - search_query: sous-chaîne du nom du restaurant ou d'une de ses cuisines
    Comparaisons insensibles à la casse.
    """
    wanted = [c.strip().lower() for c in (selected_cuisines or "").split(",") if c.strip()]
    query = (search_query or "").strip().lower()

    result = []
    for r in restaurants:
        cuisines = [str(c).lower() for c in r.get("cuisines") or []]
        if wanted and not all(any(w in c for c in cuisines) for w in wanted):
            continue
        if query:
            name = str(r.get("restaurantName") or "").lower()
            if query not in name and not any(query in c for c in cuisines):
                continue
        result.append(r)
    return result

def sort_restaurants(restaurants: List[Dict[str, Any]], sort_option: str) -> List[Dict[str, Any]]:
    """Tri croissant; option inconnue -> lastUpdated; valeurs absentes en dernier."""
    key = sort_option if sort_option in SORT_OPTIONS else "lastUpdated"
    present = [r for r in restaurants if r.get(key) is not None]
    missing = [r for r in restaurants if r.get(key) is None]
    if key == "restaurantName":
        present.sort(key=lambda r: str(r[key]).lower())
    else:
        present.sort(key=lambda r: r[key])
    return present + missing

def search_restaurants(
    city: str,
    search_query: str = "",
    selected_cuisines: str = "",
    sort_option: str = "lastUpdated",
    page: int = 1,
) -> Optional[Dict[str, Any]]:
    """
    Recherche paginée. Retourne None si aucun restaurant n'existe dans la ville
    (la vue répond alors 404 avec une page vide).
    """
    in_city = [serialize_restaurant(r) for r in repository.list_restaurants_in_city(city)]
    if not in_city:
        return None

    page = max(int(page or 1), 1)
    matched = sort_restaurants(filter_restaurants(in_city, search_query, selected_cuisines), sort_option)
    total = len(matched)
    start = PAGE_SIZE * (page - 1)
    return {
        "data": matched[start:start + PAGE_SIZE],
        "pagination": {
            "total": total,
            "page": page,
            "pages": math.ceil(total / PAGE_SIZE),
        },
    }
