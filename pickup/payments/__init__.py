"""
Module 'payments' (feature-first): point d'entrée public.
Réunit client Stripe, lecture des métadonnées d'événement et registre des événements traités.
"""

from .stripe_client import require_stripe, create_payment_intent, parse_event, WebhookSignatureError
from .metadata import extract_booking_id, extract_payment_intent_id
from .repository import is_event_processed, mark_event_processed

__all__ = [
    # stripe
    "require_stripe",
    "create_payment_intent",
    "parse_event",
    "WebhookSignatureError",
    # metadata
    "extract_booking_id",
    "extract_payment_intent_id",
    # repository
    "is_event_processed",
    "mark_event_processed",
]
