import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from backend.orders.models import CheckoutSessionRequest
from backend.payments import service as payments_service
from backend.payments.stripe_client import StripeGateway, get_gateway
from backend.utils.rate_limit import optional_rate_limit
from backend.utils.security import require_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/order/checkout", tags=["Checkout API"])

# module backend.payments.views
@router.post("/create-checkout-session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(
    body: CheckoutSessionRequest,
    user: Dict[str, Any] = Depends(require_user),
    gateway: StripeGateway = Depends(get_gateway),
):
    """
    Crée une session Checkout Stripe pour le panier de l’utilisateur authentifié.
    - Entrée JSON: {cartItems: [{menuItemId, name, quantity}], deliveryDetails, restaurantId}
    - Sécurité: require_user + rate limit (10 req / 60s)
    - Réponse: {"url": "<page de paiement Stripe>"}
    - Erreurs: 404 restaurant inconnu, 400 plat inconnu, 500 échec Stripe / enregistrement
    """
    url = payments_service.create_checkout_session(gateway, user_id=user["id"], request=body)
    return {"url": url}

@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(request: Request, gateway: StripeGateway = Depends(get_gateway)):
    """
    Webhook Stripe: checkout.session.completed fait passer la commande en 'paid'.
    - Body brut (request.body()) transmis tel quel à la vérification de signature
    - 200 {"status": "ok"|"ignored"} pour tout event vérifié sans erreur d'application
    - 500 signature invalide, 404 commande introuvable, 400 amount_total manquant
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    result = payments_service.handle_webhook(gateway, payload, sig_header)
    return JSONResponse(result)
