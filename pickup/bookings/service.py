"""
Cas d'usage 'bookings': orchestre distance, tarif, Stripe, stockage et emails.
Rôles:
- create_booking: calcule le prix, crée le PaymentIntent puis persiste la réservation 'pending'.
- handle_payment_event: réconcilie un événement Stripe vérifié avec la réservation (-> 'paid').
"""
import logging
from typing import Any, Dict
from uuid import uuid4

from starlette.concurrency import run_in_threadpool

from pickup import config
from pickup.bookings import pricing
from pickup.bookings import repository
from pickup.bookings.models import Booking, BookingCreate
from pickup.distance import providers as distance
from pickup.notifications import mailer
from pickup.payments import metadata as payments_metadata
from pickup.payments import repository as events_repo
from pickup.payments import stripe_client

logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"

async def create_booking(payload: BookingCreate) -> Dict[str, Any]:
    """
    Étapes:
      1) bookingId (uuid4)
      2) distance origine -> adresse (provider configuré)
      3) prix (pricing.calculate_price_cents)
      4) PaymentIntent Stripe tagué metadata.bookingId
      5) persistance 'pending'
    Toute erreur remonte à la vue; rien n'est persisté si l'étape 4 échoue.
    Retour: {"bookingId", "clientSecret", "amountCents"}
    """
    booking_id = str(uuid4())

    provider = distance.get_distance_provider()
    miles = max(0.0, await provider.miles(config.BUSINESS_ORIGIN_ADDRESS, payload.address))
    amount = pricing.calculate_price_cents(miles, payload.supplies)

    intent = await run_in_threadpool(
        stripe_client.create_payment_intent, amount_cents=amount, booking_id=booking_id
    )

    booking = Booking.from_create(
        payload,
        booking_id=booking_id,
        miles=miles,
        amount_cents=amount,
        payment_intent_id=intent.get("id"),
    )
    await run_in_threadpool(repository.insert_booking, booking)
    logger.info("bookings.create bookingId=%s miles=%.2f amountCents=%s", booking_id, miles, amount)

    return {
        "bookingId": booking_id,
        "clientSecret": intent.get("client_secret"),
        "amountCents": amount,
    }

async def handle_payment_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Traite un événement Stripe déjà vérifié (signature valide).
    - Types autres que payment_intent.succeeded: ignorés.
    - event.id déjà traité: ignoré (pas de second email).
    - bookingId inconnu: journalisé, aucun email.
    - Passage 'pending' -> 'paid': persistance puis emails client + admin.
    - Réservation déjà payée: statut inchangé, aucun email.
    Retour: {"status": "ignored"|"duplicate"|"not_found"|"paid"|"already_paid", "bookingId": ...}
    Les erreurs de stockage remontent (la vue répond 500, Stripe rejouera l'événement).
    """
    event_type = (event or {}).get("type") or ""
    event_id = (event or {}).get("id") or ""

    if event_type != PAYMENT_SUCCEEDED:
        logger.debug("payments.webhook ignored type=%s event_id=%s", event_type, event_id)
        return {"status": "ignored", "bookingId": None}

    if await run_in_threadpool(events_repo.is_event_processed, event_id):
        logger.info("payments.webhook duplicate event_id=%s", event_id)
        return {"status": "duplicate", "bookingId": None}

    booking_id = payments_metadata.extract_booking_id(event)
    logger.info("payment_intent.succeeded bookingId=%s event_id=%s", booking_id, event_id)

    booking, transitioned = (None, False)
    if booking_id:
        booking, transitioned = await run_in_threadpool(repository.mark_paid, booking_id)

    if booking is None:
        logger.warning("No booking found for bookingId=%s event_id=%s", booking_id, event_id)
        status = "not_found"
    elif transitioned:
        await mailer.notify_booking_paid(booking)
        status = "paid"
    else:
        logger.info("Booking already paid, notifications skipped bookingId=%s", booking_id)
        status = "already_paid"

    await run_in_threadpool(events_repo.mark_event_processed, event_id, event_type)
    return {"status": status, "bookingId": booking_id}
