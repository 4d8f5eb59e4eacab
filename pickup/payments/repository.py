"""
Accès aux données pour la feature 'payments': registre des événements Stripe traités.
Stripe peut livrer plusieurs fois le même événement; on ignore un event.id déjà traité.
Stripe ne rejoue plus un événement au-delà de 3 jours: les entrées plus anciennes sont purgées
à chaque enregistrement (un rejeu tardif reste sans effet, la réservation étant déjà 'paid').
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pickup import config
from pickup.infra.file_store import JsonFileStore

logger = logging.getLogger(__name__)

EVENT_RETENTION = timedelta(days=3)

# module pickup.payments.repository
def get_store() -> JsonFileStore:
    return JsonFileStore(config.DATA_DIR / config.EVENTS_FILENAME)

def init_store() -> None:
    get_store().ensure()

def _processed_at(row: Dict[str, Any]) -> Optional[datetime]:
    value = row.get("processedAtISO")
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

def _is_expired(row: Any, cutoff: datetime) -> bool:
    # Horodatage absent ou illisible: entrée conservée
    if not isinstance(row, dict):
        return False
    processed_at = _processed_at(row)
    return processed_at is not None and processed_at < cutoff

def is_event_processed(event_id: str) -> bool:
    if not event_id:
        return False
    return any(isinstance(row, dict) and row.get("eventId") == event_id for row in get_store().read())

def mark_event_processed(event_id: str, event_type: str = "", now: Optional[datetime] = None) -> None:
    """
    Enregistre l'event.id (sans doublon) et purge les entrées hors fenêtre de rejeu Stripe.
    - now: horloge injectable (tests).
    """
    if not event_id:
        return
    now = now or datetime.now(timezone.utc)
    cutoff = now - EVENT_RETENTION
    with get_store().transaction() as rows:
        kept = [row for row in rows if not _is_expired(row, cutoff)]
        pruned = len(rows) - len(kept)
        rows[:] = kept
        if not any(isinstance(row, dict) and row.get("eventId") == event_id for row in rows):
            rows.append({"eventId": event_id, "type": event_type, "processedAtISO": now.isoformat().replace("+00:00", "Z")})
    if pruned:
        logger.info("payments.repository pruned=%s expired events", pruned)
    logger.info("payments.repository.mark_event_processed event_id=%s type=%s", event_id, event_type)
