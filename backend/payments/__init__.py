"""
Module 'payments' (feature-first): point d'entrée public.
Réunit tarification du panier, lecture des events Stripe, client Stripe et cas d'usage.
"""

from .cart import to_subunits, from_subunits, to_line_items, to_shipping_options, make_metadata, line_items_total
from .metadata import session_from_event, extract_order_id, extract_amount_total
from .stripe_client import StripeGateway, get_gateway
from .service import create_checkout_session, apply_completed_session, handle_webhook

__all__ = [
    # cart
    "to_subunits",
    "from_subunits",
    "to_line_items",
    "to_shipping_options",
    "make_metadata",
    "line_items_total",
    # metadata
    "session_from_event",
    "extract_order_id",
    "extract_amount_total",
    # stripe
    "StripeGateway",
    "get_gateway",
    # services
    "create_checkout_session",
    "apply_completed_session",
    "handle_webhook",
]
