"""
Cas d'usage 'payments': orchestre restaurants, orders, cart, stripe_client, metadata.
- create_checkout_session: commande 'placed' + session Stripe, retourne l'URL de paiement
- handle_webhook: vérifie la signature puis applique checkout.session.completed
"""
from typing import Any, Dict
import logging

from backend.orders import repository as orders_repository
from backend.orders.models import CheckoutSessionRequest, advance_status, is_confirmed, new_order, OrderStatus
from backend.orders.service import current_status
from backend.restaurants import repository as restaurants_repository
from backend.utils.errors import BadRequestError, NotFoundError, ServerError, SignatureVerificationFailed

from . import cart
from . import metadata as meta
from .stripe_client import StripeGateway

logger = logging.getLogger(__name__)

COMPLETED_EVENT = "checkout.session.completed"

def create_checkout_session(
    gateway: StripeGateway,
    *,
    user_id: str,
    request: CheckoutSessionRequest,
) -> str:
    """
    Prépare la commande et la session Stripe pour un panier.
    Étapes:
      1) Charger le restaurant (NotFoundError sinon)
      2) Construire la commande 'placed' (id généré ici, embarqué dans metadata.orderId)
      3) Prix des lignes depuis le menu stocké + livraison du restaurant
      4) Créer la session; sans URL -> ServerError et rien n'est enregistré
      5) Enregistrer la commande puis retourner l'URL
    """
    restaurant = restaurants_repository.get_restaurant(request.restaurantId)
    if not restaurant:
        raise NotFoundError("Restaurant not found")

    order = new_order(restaurant_id=str(restaurant["id"]), user_id=user_id, request=request)

    line_items = cart.to_line_items(request.cartItems, restaurant.get("menu_items") or [], gateway.currency)
    shipping_options = cart.to_shipping_options(restaurant.get("delivery_price"), gateway.currency)

    restaurant_id = str(restaurant["id"])
    session = gateway.create_checkout_session(
        line_items=line_items,
        shipping_options=shipping_options,
        metadata=cart.make_metadata(order["id"], restaurant_id),
        success_url=f"{gateway.frontend_url}/order-status?success=true",
        cancel_url=f"{gateway.frontend_url}/detail/{restaurant_id}?cancelled=true",
    )
    url = session.get("url")
    if not url:
        logger.error("payments.checkout no url in session id=%s order_id=%s", session.get("id"), order["id"])
        raise ServerError("Error while creating the stripe session")

    if not orders_repository.insert_order(order):
        # Commande non enregistrée: la session ne doit pas pouvoir être payée
        if session.get("id"):
            gateway.expire_session(session["id"])
        raise ServerError("Error while saving the order")

    logger.info("payments.checkout order_id=%s restaurant_id=%s lines=%s", order["id"], restaurant_id, len(line_items))
    return url

def apply_completed_session(session: Dict[str, Any]) -> Dict[str, Any]:
    """
    Applique un checkout.session.completed vérifié.
    - NotFoundError: metadata.orderId ne correspond à aucune commande
    - BadRequestError: amount_total absent, la commande reste inchangée
    - ServerError: statut stocké hors OrderStatus (journalisé par backend.orders.service)
    - Commande déjà confirmée (redélivrance Stripe): aucune écriture, {"status": "ok", "applied": False}
    - Sinon placed -> paid avec total_amount = amount_total / 100 (une seule mise à jour conditionnelle)
    """
    order_id = meta.extract_order_id(session)
    order = orders_repository.get_order(order_id) if order_id else None
    if not order:
        logger.error("payments.webhook completed session matches no order order_id=%s session_id=%s", order_id, session.get("id"))
        raise NotFoundError("Order not found")

    amount_total = meta.extract_amount_total(session)
    if amount_total is None:
        logger.warning("payments.webhook amount_total missing order_id=%s", order_id)
        raise BadRequestError("Amount total is missing in the event data")

    status = current_status(order)
    if is_confirmed(status):
        logger.info("payments.webhook already confirmed order_id=%s status=%s", order_id, order["status"])
        return {"status": "ok", "applied": False}

    advance_status(status, OrderStatus.PAID)
    total = cart.from_subunits(amount_total)
    try:
        updated = orders_repository.mark_order_paid(order_id, float(total))
    except Exception:
        logger.exception("payments.webhook mark_order_paid failed order_id=%s", order_id)
        raise ServerError("Error while updating the order")

    if not updated:
        # Livraison concurrente: une autre requête a déjà fait la transition
        current = orders_repository.get_order(order_id)
        if current and is_confirmed(current_status(current)):
            return {"status": "ok", "applied": False}
        raise ServerError("Error while updating the order")

    logger.info("payments.webhook paid order_id=%s total=%s", order_id, total)
    return {"status": "ok", "applied": True}

def handle_webhook(gateway: StripeGateway, payload: bytes, sig_header: str | None) -> Dict[str, Any]:
    """
    Point d'entrée du webhook Stripe.
    - Signature invalide: SignatureVerificationFailed, aucune écriture
    - Type autre que checkout.session.completed: acquitté sans effet ({"status": "ignored"})
    """
    try:
        event = gateway.construct_event(payload, sig_header)
    except SignatureVerificationFailed as e:
        logger.warning("payments.webhook rejected: %s", e.detail)
        raise

    event_type = event.get("type")
    if event_type != COMPLETED_EVENT:
        logger.debug("payments.webhook ignoring event type=%s", event_type)
        return {"status": "ignored"}

    return apply_completed_session(meta.session_from_event(event))
