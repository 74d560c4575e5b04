# module backend.restaurants.views
"""Endpoints Restaurants.
- /api/my/restaurant: restaurant du propriétaire connecté (GET, POST multipart, PUT multipart)
- /api/restaurant/{id}: détail public (page de commande)
- /api/restaurant/search/{city}: recherche paginée par ville
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from backend.restaurants import service as restaurants_service
from backend.restaurants.models import parse_restaurant_form, validate_restaurant_form
from backend.utils.security import require_user

my_router = APIRouter(prefix="/api/my/restaurant", tags=["My Restaurant API"])
router = APIRouter(prefix="/api/restaurant", tags=["Restaurant API"])

async def _read_image(form: Any) -> Optional[tuple[bytes, str]]:
    upload = form.get("imageFile")
    if not isinstance(upload, UploadFile):
        return None
    content = await upload.read()
    if not content:
        return None
    return content, upload.content_type or "application/octet-stream"

@my_router.get("")
def get_my_restaurant(user: Dict[str, Any] = Depends(require_user)):
    return restaurants_service.get_my_restaurant(user["id"])

@my_router.post("")
async def create_my_restaurant(request: Request, user: Dict[str, Any] = Depends(require_user)):
    """Création (201). Champs validés avant tout upload d'image."""
    form = await request.form()
    payload = validate_restaurant_form(parse_restaurant_form(form))
    image = await _read_image(form)
    created = restaurants_service.create_my_restaurant(user["id"], payload, image)
    return JSONResponse(created, status_code=201)

@my_router.put("")
async def update_my_restaurant(request: Request, user: Dict[str, Any] = Depends(require_user)):
    form = await request.form()
    payload = validate_restaurant_form(parse_restaurant_form(form))
    image = await _read_image(form)
    return restaurants_service.update_my_restaurant(user["id"], payload, image)

@router.get("/search/{city}")
def search_restaurants(
    city: str,
    searchQuery: str = "",
    selectedCuisines: str = "",
    sortOption: str = "lastUpdated",
    page: int = 1,
):
    result = restaurants_service.search_restaurants(city, searchQuery, selectedCuisines, sortOption, page)
    if result is None:
        return JSONResponse(
            {"data": [], "pagination": {"total": 0, "page": 1, "pages": 1}},
            status_code=404,
        )
    return result

@router.get("/{restaurant_id}")
def get_restaurant(restaurant_id: str):
    return restaurants_service.get_restaurant(restaurant_id)
