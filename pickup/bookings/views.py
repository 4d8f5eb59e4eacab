# module pickup.bookings.views

"""Endpoints de la feature Réservations.
- GET /api/bookings: liste complète (calendrier/admin).
- GET /api/bookings/{booking_id}: une réservation, 404 si absente.
- POST /api/bookings: crée la réservation + PaymentIntent (rate-limité).
Erreurs: messages génériques côté client, détail complet dans les logs.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from pickup.bookings import repository
from pickup.bookings import service as bookings_service
from pickup.bookings.models import BookingCreate
from pickup.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/bookings", tags=["Bookings API"])


@router.get("")
async def list_bookings():
    try:
        return await run_in_threadpool(repository.list_bookings)
    except Exception:
        logger.exception("GET /api/bookings error")
        raise HTTPException(status_code=500, detail="Failed to load bookings")


@router.get("/{booking_id}")
async def get_booking(booking_id: str):
    try:
        booking = await run_in_threadpool(repository.get_booking, booking_id)
    except Exception:
        logger.exception("GET /api/bookings/%s error", booking_id)
        raise HTTPException(status_code=500, detail="Failed to load booking")
    if booking is None:
        raise HTTPException(status_code=404, detail="Not found")
    return booking


@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_booking(payload: BookingCreate):
    """Crée une réservation 'pending' et renvoie le client_secret Stripe.
    - Entrée JSON: { address, firstName, lastName, email, phone, pickupDateTimeISO, notes, supplies, extra }
    - Sortie: { bookingId, clientSecret, amountCents }
    - 422 si payload invalide, 500 si distance/Stripe/stockage échoue.
    """
    try:
        return await bookings_service.create_booking(payload)
    except Exception:
        logger.exception("POST /api/bookings error")
        raise HTTPException(status_code=500, detail="Failed to create booking")
