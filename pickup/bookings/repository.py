"""
Accès aux données pour la feature 'bookings' (fichier DATA_DIR/bookings.json).
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from pickup import config
from pickup.infra.file_store import JsonFileStore
from pickup.bookings.models import Booking, STATUS_PAID, utc_now_iso

logger = logging.getLogger(__name__)

# module pickup.bookings.repository
def get_store() -> JsonFileStore:
    """Store des réservations, résolu à chaque appel (DATA_DIR patchable en tests)."""
    return JsonFileStore(config.DATA_DIR / config.BOOKINGS_FILENAME)

def init_store() -> None:
    """Crée data/bookings.json avec [] s'il n'existe pas (appelé au démarrage)."""
    get_store().ensure()

def list_bookings() -> List[Dict[str, Any]]:
    """
    Toutes les réservations, dans l'ordre du fichier, telles que stockées.
    Les enregistrements anciens (champs libres, types hétérogènes) sont renvoyés sans filtrage.
    """
    return get_store().read()

def get_booking(booking_id: str) -> Optional[Dict[str, Any]]:
    """Recherche linéaire par bookingId (enregistrement brut); None si absent."""
    for row in get_store().read():
        if isinstance(row, dict) and row.get("bookingId") == booking_id:
            return row
    return None

def insert_booking(booking: Booking) -> Booking:
    """
    Ajoute une réservation en fin de collection.
    - Refuse un bookingId déjà présent (un seul enregistrement par identifiant).
    """
    with get_store().transaction() as rows:
        if any(isinstance(row, dict) and row.get("bookingId") == booking.booking_id for row in rows):
            raise ValueError(f"bookingId déjà présent: {booking.booking_id}")
        rows.append(booking.to_json())
    logger.info("bookings.repository.insert bookingId=%s amountCents=%s", booking.booking_id, booking.amount_cents)
    return booking

def mark_paid(booking_id: str) -> Tuple[Optional[Booking], bool]:
    """
    Passe la réservation au statut 'paid' (idempotent).
    Retour: (booking, transitioned)
    - (None, False) si le bookingId est inconnu (fichier inchangé).
    - transitioned=False si la réservation était déjà payée (paidAtISO d'origine conservé).
    """
    with get_store().transaction() as rows:
        for row in rows:
            if not isinstance(row, dict) or row.get("bookingId") != booking_id:
                continue
            if row.get("status") == STATUS_PAID:
                return Booking.from_row(row), False
            # Mise à jour en place: les autres champs restent tels quels
            row["status"] = STATUS_PAID
            row["paidAtISO"] = utc_now_iso()
            return Booking.from_row(row), True
    return None, False
