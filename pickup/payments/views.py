import logging

from fastapi import APIRouter, Request, HTTPException

from pickup.payments import stripe_client
from pickup.bookings import service as bookings_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/stripe", tags=["Payments API"])

# module pickup.payments.views
@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request):
    """
    Webhook Stripe: payment_intent.succeeded -> réservation 'paid' + emails.
    - Signature: stripe_client.parse_event (corps brut + Stripe-Signature + STRIPE_WEBHOOK_SECRET)
    - 400 si signature invalide (message de vérification renvoyé), rien n'est modifié.
    - Toujours {"received": true} une fois la signature valide, quel que soit le sort des emails.
    - 500 si erreur interne inattendue (Stripe rejouera l'événement).
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    try:
        event = stripe_client.parse_event(payload, sig_header)
    except stripe_client.WebhookSignatureError as e:
        logger.error("Webhook signature verification failed: %s", e)
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}")

    try:
        result = await bookings_service.handle_payment_event(event)
        logger.info(
            "payments.webhook event_id=%s type=%s status=%s",
            event.get("id"), event.get("type"), result.get("status"),
        )
        return {"received": True}
    except Exception:
        logger.exception("Webhook handler error event_id=%s", event.get("id"))
        raise HTTPException(status_code=500, detail="Webhook handler failed")
