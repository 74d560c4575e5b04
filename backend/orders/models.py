"""
Modèle Order.
- OrderStatus: énumération fermée des statuts, progression strictement vers l'avant
- advance_status: table de transitions explicite (rejette paid -> placed, etc.)
- CheckoutSessionRequest: payload de création de session (quantités encodées en chaîne)
- new_order / serialize_order: ligne de la table orders <-> JSON camelCase
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, EmailStr, Field, field_validator


class OrderStatus(str, Enum):
    PLACED = "placed"
    PAID = "paid"
    IN_PROGRESS = "inProgress"
    OUT_FOR_DELIVERY = "outForDelivery"
    DELIVERED = "delivered"


ALLOWED_TRANSITIONS: Dict[OrderStatus, frozenset] = {
    OrderStatus.PLACED: frozenset({OrderStatus.PAID}),
    OrderStatus.PAID: frozenset({OrderStatus.IN_PROGRESS, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED}),
    OrderStatus.IN_PROGRESS: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
}

# placed et paid ne sont écrits que par le checkout et le webhook Stripe
OWNER_SETTABLE = frozenset({OrderStatus.IN_PROGRESS, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED})


class InvalidStatusTransition(ValueError):
    def __init__(self, current: OrderStatus, target: OrderStatus):
        super().__init__(f"Invalid status transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


def advance_status(current: str | OrderStatus, target: str | OrderStatus) -> OrderStatus:
    """Retourne le statut cible si la transition est permise, InvalidStatusTransition sinon."""
    current, target = OrderStatus(current), OrderStatus(target)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(current, target)
    return target


def is_confirmed(status: str | OrderStatus) -> bool:
    """True si le paiement a déjà été confirmé (paid ou au-delà)."""
    return OrderStatus(status) != OrderStatus.PLACED


class CartItemRequest(BaseModel):
    menuItemId: str
    name: str = ""
    quantity: int

    @field_validator("menuItemId")
    def menu_item_id_not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("menuItemId is required")
        return v

    @field_validator("quantity", mode="before")
    def quantity_positive_integer(cls, v: Any) -> int:
        raw = str(v).strip()
        if not raw.isdigit() or int(raw) <= 0:
            raise ValueError("quantity must be a positive integer")
        return int(raw)


class DeliveryDetails(BaseModel):
    email: EmailStr
    name: str
    addressLineOne: str
    city: str


class CheckoutSessionRequest(BaseModel):
    cartItems: List[CartItemRequest] = Field(min_length=1)
    deliveryDetails: DeliveryDetails
    restaurantId: str


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus


def new_order(*, restaurant_id: str, user_id: str, request: CheckoutSessionRequest) -> Dict[str, Any]:
    """Ligne orders en statut placed; total_amount reste NULL jusqu'à la confirmation Stripe."""
    return {
        "id": str(uuid4()),
        "restaurant_id": restaurant_id,
        "user_id": user_id,
        "status": OrderStatus.PLACED.value,
        "cart_items": [item.model_dump() for item in request.cartItems],
        "delivery_details": request.deliveryDetails.model_dump(),
        "total_amount": None,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }


def serialize_order(row: Dict[str, Any], restaurant: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "id": row.get("id"),
        "restaurant": restaurant if restaurant is not None else row.get("restaurant_id"),
        "user": row.get("user_id"),
        "status": row.get("status"),
        "cartItems": row.get("cart_items") or [],
        "deliveryDetails": row.get("delivery_details") or {},
        "totalAmount": row.get("total_amount"),
        "createdAt": row.get("created_at"),
    }
