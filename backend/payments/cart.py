"""
Logique panier pure (pas de Stripe, pas de DB).
Les prix viennent toujours du menu stocké du restaurant, jamais de la requête.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from backend.orders.models import CartItemRequest
from backend.utils.errors import BadRequestError

_SUBUNITS = Decimal(100)

# module backend.payments.cart
def to_subunits(amount: Any) -> int:
    """
    Montant décimal -> plus petite unité Stripe (ex: 150.00 -> 15000).
    Passe par str() pour éviter les erreurs binaires des float (19.99 -> 1999, pas 1998).
    """
    return int((Decimal(str(amount)) * _SUBUNITS).quantize(Decimal(1), rounding=ROUND_HALF_UP))

def from_subunits(amount: int) -> Decimal:
    """Sous-unités Stripe -> montant décimal à 2 chiffres (ex: 19000 -> Decimal('190.00'))."""
    return (Decimal(int(amount)) / _SUBUNITS).quantize(Decimal("0.01"))

def menu_by_id(menu_items: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return {str(item.get("id")): item for item in menu_items or [] if item.get("id") is not None}

def to_line_items(
    cart_items: List[CartItemRequest],
    menu_items: Iterable[Dict[str, Any]],
    currency: str,
) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) à partir du panier et du menu du restaurant.
    - Une ligne par entrée du panier, dans l'ordre du panier
    - BadRequestError dès qu'un menuItemId est introuvable: aucune liste partielle
    """
    menu = menu_by_id(menu_items)
    line_items: List[Dict[str, Any]] = []
    for cart_item in cart_items:
        item = menu.get(str(cart_item.menuItemId))
        if not item:
            raise BadRequestError(f"Menu item not found: {cart_item.menuItemId}")
        line_items.append({
            "quantity": cart_item.quantity,
            "price_data": {
                "currency": currency,
                "unit_amount": to_subunits(item.get("price") or 0),
                "product_data": {"name": item.get("name") or "Item"},
            },
        })
    return line_items

def to_shipping_options(delivery_price: Any, currency: str) -> List[Dict[str, Any]]:
    """Frais de livraison du restaurant sous forme de shipping_rate fixe."""
    return [
        {
            "shipping_rate_data": {
                "display_name": "Delivery",
                "type": "fixed_amount",
                "fixed_amount": {
                    "amount": to_subunits(delivery_price or 0),
                    "currency": currency,
                },
            },
        }
    ]

def make_metadata(order_id: str, restaurant_id: str) -> Dict[str, str]:
    """Métadonnées de session: orderId permet au webhook de retrouver la commande."""
    return {"orderId": str(order_id), "restaurantId": str(restaurant_id)}

def line_items_total(line_items: Iterable[Dict[str, Any]]) -> int:
    """Somme unit_amount × quantity des lignes (sous-unités, hors livraison)."""
    return sum(li["price_data"]["unit_amount"] * li["quantity"] for li in line_items)
