from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"message": "Health is ok!"}

@router.get("/payments")
def health_payments(request: Request):
    """État de la configuration Stripe (sans exposer les secrets)."""
    gateway = getattr(request.app.state, "payment_gateway", None)
    settings = getattr(gateway, "settings", None)
    return {
        "configured": bool(settings and settings.secret_key),
        "webhook_secret": bool(settings and settings.webhook_secret),
        "currency": getattr(settings, "currency", None),
        "rate_limit_enabled": getattr(request.app.state, "rate_limit_enabled", None),
    }
