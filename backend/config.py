# backend.config
from dataclasses import dataclass
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe), CORS/hosts
- Fournit PaymentSettings: configuration Stripe construite une seule fois au démarrage
  (lifespan) puis injectée dans les vues, au lieu d'un client Stripe global.
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

# Supabase: URL et clés (anon/service)
# - SUPABASE_URL peut parfois être sans schéma: on préfixe en https:// si nécessaire
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Bucket Supabase Storage pour les images de restaurants
STORAGE_BUCKET = _clean_env(os.getenv("STORAGE_BUCKET") or "restaurant-images")

COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS / hôtes
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Proxies dont les en-têtes X-Forwarded-* sont acceptés (IP client pour le rate limiting)
FORWARDED_ALLOW_IPS = [h.strip() for h in os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1").split(",") if h.strip()]

# Stripe: clé secrète, secret webhook, devise unique pour checkout et réconciliation
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or os.getenv("STRIPE_API_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
CHECKOUT_CURRENCY = _clean_env(os.getenv("CHECKOUT_CURRENCY") or "inr").lower()

# Front: base des URLs de redirection (succès / annulation du checkout)
FRONTEND_URL = _clean_env(os.getenv("FRONTEND_URL") or "http://localhost:5173").rstrip("/")


@dataclass(frozen=True)
class PaymentSettings:
    """Paramètres du fournisseur de paiement, figés pour la durée du process."""
    secret_key: str
    webhook_secret: str
    currency: str = "inr"
    frontend_url: str = "http://localhost:5173"


def load_payment_settings() -> PaymentSettings:
    """Construit PaymentSettings depuis l'environnement (appelé par le lifespan)."""
    return PaymentSettings(
        secret_key=STRIPE_SECRET_KEY,
        webhook_secret=STRIPE_WEBHOOK_SECRET,
        currency=CHECKOUT_CURRENCY,
        frontend_url=FRONTEND_URL,
    )
