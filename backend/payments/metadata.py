"""
Lecture des données utiles d'un event Stripe checkout.session.completed.
"""
from typing import Any, Dict, Optional

# module backend.payments.metadata
def session_from_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Objet session (event.data.object), {} si absent."""
    return ((event or {}).get("data") or {}).get("object") or {}

def extract_order_id(session: Dict[str, Any]) -> Optional[str]:
    """metadata.orderId posé à la création de la session."""
    meta = (session or {}).get("metadata") or {}
    order_id = meta.get("orderId")
    return str(order_id) if order_id else None

def extract_amount_total(session: Dict[str, Any]) -> Optional[int]:
    """amount_total en sous-unités, None si absent, null ou non entier."""
    amount = (session or {}).get("amount_total")
    if amount is None or isinstance(amount, bool):
        return None
    try:
        return int(amount)
    except (TypeError, ValueError):
        return None
