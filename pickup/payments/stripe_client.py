"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
"""
from typing import Any, Dict, Optional

import stripe

from pickup import config

# Tolérance Stripe par défaut sur l'horodatage de la signature (secondes)
SIGNATURE_TOLERANCE = 300

class WebhookSignatureError(Exception):
    """Signature webhook absente, invalide, ou payload illisible."""

# module pickup.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l’emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY.
    - Soulève RuntimeError si la clé est absente (aucun appel possible).
    """
    if not config.STRIPE_SECRET_KEY:
        raise RuntimeError("STRIPE_SECRET_KEY manquant")
    stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe

def create_payment_intent(*, amount_cents: int, booking_id: str) -> Dict[str, Any]:
    """
    Crée un PaymentIntent Stripe pour une réservation.
    - metadata.bookingId relie le paiement à la réservation (lu par le webhook).
    - automatic_payment_methods activé (Payment Element côté front).
    Retour: {"id": "pi_...", "client_secret": "pi_..._secret_..."}
    """
    require_stripe()
    intent = stripe.PaymentIntent.create(
        amount=int(amount_cents),
        currency=config.PAYMENT_CURRENCY,
        automatic_payment_methods={"enabled": True},
        metadata={"bookingId": booking_id},
    )
    return {"id": intent["id"], "client_secret": intent["client_secret"]}

def parse_event(payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
    """
    Valide la signature Stripe puis décode l'événement.
    - Vérification et construction via stripe.Webhook.construct_event (STRIPE_WEBHOOK_SECRET).
    - Soulève WebhookSignatureError avec le message de vérification en cas d'échec.
    Retour: l'événement sous forme de dict.
    """
    secret = config.STRIPE_WEBHOOK_SECRET
    if not secret:
        raise WebhookSignatureError("STRIPE_WEBHOOK_SECRET manquant")
    if not sig_header:
        raise WebhookSignatureError("No stripe-signature header value was provided.")
    try:
        event = stripe.Webhook.construct_event(payload, sig_header, secret, SIGNATURE_TOLERANCE)
    except Exception as e:
        raise WebhookSignatureError(str(e)) from e
    return event.to_dict()
