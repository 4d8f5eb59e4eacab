"""
Lecture des champs utiles d'un événement Stripe (webhook).
"""
from typing import Any, Dict, Optional

# module pickup.payments.metadata
def event_object(event: Dict[str, Any]) -> Dict[str, Any]:
    data = (event or {}).get("data") if isinstance(event, dict) else None
    obj = (data or {}).get("object") if isinstance(data, dict) else None
    return obj if isinstance(obj, dict) else {}

def extract_booking_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Extrait le bookingId depuis event.data.object.metadata.bookingId.
    - Retourne None si absent ou vide.
    """
    meta = event_object(event).get("metadata") or {}
    booking_id = meta.get("bookingId") if isinstance(meta, dict) else None
    return str(booking_id) if booking_id else None

def extract_payment_intent_id(event: Dict[str, Any]) -> Optional[str]:
    return event_object(event).get("id") or None
