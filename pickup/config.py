# pickup.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose le répertoire de données (DATA_DIR) et les fichiers JSON associés
- Normalise et expose les secrets (Stripe, Google Maps, SMTP), CORS et adresse d'origine
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

# Stripe: clé secrète (création des PaymentIntent) et secret webhook (signature)
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "usd").lower()

# Distance: sans clé Google, le calcul retombe sur 0 mile (tarif de base)
GOOGLE_MAPS_API_KEY = _clean_env(os.getenv("GOOGLE_MAPS_API_KEY") or "")
BUSINESS_ORIGIN_ADDRESS = (
    _clean_env(os.getenv("BUSINESS_ORIGIN_ADDRESS"))
    or "415 Pisgah Church Rd, Greensboro, NC 27455"
)

# SMTP: sans SMTP_USER/SMTP_PASS, aucun email n'est envoyé
SMTP_USER = _clean_env(os.getenv("SMTP_USER") or "")
SMTP_PASS = _clean_env(os.getenv("SMTP_PASS") or "")
SMTP_HOST = _clean_env(os.getenv("SMTP_HOST") or "smtp.gmail.com")
SMTP_PORT = _int_env("SMTP_PORT", 465)
ADMIN_EMAIL = _clean_env(os.getenv("ADMIN_EMAIL") or "") or SMTP_USER

# Stockage fichier (un tableau JSON par collection)
DATA_DIR = Path(_clean_env(os.getenv("DATA_DIR")) or (BASE_DIR / "data"))
BOOKINGS_FILENAME = "bookings.json"
EVENTS_FILENAME = "stripe_events.json"

# CORS (front public)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

PORT = _int_env("PORT", 4000)
