"""
Schémas du domaine Restaurants.
- MenuItem / RestaurantForm: validation du formulaire multipart (création, mise à jour)
- parse_restaurant_form: FormData (clés indexées "cuisines[0]", "menuItems[0][name]" ou JSON) -> dict
- to_row / serialize_restaurant: passage colonnes snake_case <-> JSON camelCase
"""
import json
import re
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationError, field_validator

from backend.utils.errors import BadRequestError


class MenuItem(BaseModel):
    id: Optional[str] = None
    name: str
    price: float = Field(ge=0)

    @field_validator("name")
    def name_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Menu Item name is required")
        return v


class RestaurantForm(BaseModel):
    restaurantName: str
    city: str
    country: str
    deliveryPrice: float = Field(ge=0)
    estimatedDeliveryTime: int = Field(ge=0)
    cuisines: List[str] = Field(min_length=1)
    menuItems: List[MenuItem] = Field(default_factory=list)

    @field_validator("restaurantName", "city", "country")
    def not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("cuisines")
    def clean_cuisines(cls, v: List[str]) -> List[str]:
        cleaned = [c.strip() for c in v if c and c.strip()]
        if not cleaned:
            raise ValueError("Cuisines array cannot be empty")
        return cleaned


_INDEXED_LIST = re.compile(r"^(\w+)\[(\d+)\]$")
_INDEXED_FIELD = re.compile(r"^(\w+)\[(\d+)\]\[(\w+)\]$")


def parse_restaurant_form(form: Any) -> Dict[str, Any]:
    """
    Reconstruit le payload à partir d'un FormData.
    Accepte les deux encodages envoyés par les fronts:
      - cuisines[0]=..., menuItems[0][name]=..., menuItems[0][price]=...
      - cuisines='["a","b"]', menuItems='[{"name": ..., "price": ...}]'
    Les fichiers (UploadFile) sont ignorés ici.
    """
    data: Dict[str, Any] = {}
    lists: Dict[str, Dict[int, Any]] = {}
    for key, value in form.multi_items():
        if not isinstance(value, str):
            continue
        m = _INDEXED_FIELD.match(key)
        if m:
            name, idx, field = m.group(1), int(m.group(2)), m.group(3)
            lists.setdefault(name, {}).setdefault(idx, {})[field] = value
            continue
        m = _INDEXED_LIST.match(key)
        if m:
            lists.setdefault(m.group(1), {})[int(m.group(2))] = value
            continue
        if key in ("cuisines", "menuItems"):
            try:
                data[key] = json.loads(value)
            except ValueError:
                data.setdefault(key, []).append(value)
            continue
        data[key] = value
    for name, by_index in lists.items():
        data[name] = [by_index[i] for i in sorted(by_index)]
    return data


def validate_restaurant_form(payload: Dict[str, Any]) -> RestaurantForm:
    """Valide le payload; BadRequestError avec la liste des champs fautifs sinon."""
    try:
        return RestaurantForm.model_validate(payload)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise BadRequestError(errors)


def to_row(form: RestaurantForm) -> Dict[str, Any]:
    """Colonnes de la table restaurants; les plats reçoivent un id stable s'ils n'en ont pas."""
    return {
        "restaurant_name": form.restaurantName,
        "city": form.city,
        "country": form.country,
        "delivery_price": form.deliveryPrice,
        "estimated_delivery_time": form.estimatedDeliveryTime,
        "cuisines": form.cuisines,
        "menu_items": [
            {"id": item.id or uuid4().hex, "name": item.name, "price": item.price}
            for item in form.menuItems
        ],
    }


def serialize_restaurant(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": row.get("id"),
        "user": row.get("user_id"),
        "restaurantName": row.get("restaurant_name"),
        "city": row.get("city"),
        "country": row.get("country"),
        "deliveryPrice": row.get("delivery_price"),
        "estimatedDeliveryTime": row.get("estimated_delivery_time"),
        "cuisines": row.get("cuisines") or [],
        "menuItems": row.get("menu_items") or [],
        "imageUrl": row.get("image_url"),
        "lastUpdated": row.get("last_updated"),
    }
