"""
Adaptateur Stripe: centralise les appels Stripe.
La configuration (clé secrète, secret webhook, devise) est portée par une instance
StripeGateway créée au démarrage (lifespan) et injectée via get_gateway; aucune
variable globale stripe.api_key n'est positionnée.
"""
import json
import logging
from typing import Any, Dict, List

import stripe
from fastapi import Request

from backend.config import PaymentSettings
from backend.utils.errors import ServerError, SignatureVerificationFailed

logger = logging.getLogger(__name__)

# module backend.payments.stripe_client
class StripeGateway:
    def __init__(self, settings: PaymentSettings):
        self.settings = settings

    @property
    def currency(self) -> str:
        return self.settings.currency

    @property
    def frontend_url(self) -> str:
        return self.settings.frontend_url

    def create_checkout_session(
        self,
        *,
        line_items: List[Dict[str, Any]],
        shipping_options: List[Dict[str, Any]],
        metadata: Dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> Dict[str, Any]:
        """
        Crée une session Stripe Checkout (mode payment).
        Retour: {"id": "cs_test_...", "url": "https://..."} (url None si Stripe n'en fournit pas).
        ServerError si Stripe refuse la requête.
        """
        try:
            session = stripe.checkout.Session.create(
                api_key=self.settings.secret_key,
                line_items=line_items,
                shipping_options=shipping_options,
                mode="payment",
                metadata=metadata,
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            logger.exception("stripe_client.create_checkout_session failed")
            raise ServerError(str(getattr(e, "user_message", None) or e))
        # StripeObject n'est plus un dict dans les SDK récents: lecture par attributs
        return {"id": getattr(session, "id", None), "url": getattr(session, "url", None)}

    def expire_session(self, session_id: str) -> None:
        """Expire une session dont la commande n'a pas pu être enregistrée (best-effort)."""
        try:
            stripe.checkout.Session.expire(session_id, api_key=self.settings.secret_key)
        except stripe.StripeError:
            logger.exception("stripe_client.expire_session failed session_id=%s", session_id)

    def construct_event(self, payload: bytes, sig_header: str | None) -> Dict[str, Any]:
        """
        Valide la signature Stripe-Signature sur le body brut puis parse le JSON.
        - payload: octets exacts reçus (toute ré-sérialisation casse la signature)
        - SignatureVerificationFailed si signature absente/invalide ou payload illisible
        Retour: l'event sous forme de dict.
        """
        if not sig_header:
            raise SignatureVerificationFailed("Webhook error: missing Stripe-Signature header")
        try:
            text = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                text,
                sig_header,
                self.settings.webhook_secret,
                stripe.Webhook.DEFAULT_TOLERANCE,
            )
            event = json.loads(text)
        except (ValueError, stripe.SignatureVerificationError) as e:
            raise SignatureVerificationFailed(f"Webhook error: {e}")
        if not isinstance(event, dict):
            raise SignatureVerificationFailed("Webhook error: unexpected payload")
        return event


def get_gateway(request: Request) -> StripeGateway:
    """Dépendance FastAPI: gateway construite par le lifespan (app.state.payment_gateway)."""
    gateway = getattr(request.app.state, "payment_gateway", None)
    if gateway is None:
        raise ServerError("Payment provider is not configured")
    return gateway
