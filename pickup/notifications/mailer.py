"""
Adaptateur email (SMTP).
- get_mailer(): None si SMTP_USER/SMTP_PASS absents (aucun envoi, juste un log).
- notify_booking_paid(): email client + email admin, chacun tenté indépendamment.
"""
import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Dict, Optional

from pickup import config
from pickup.bookings.models import Booking
from pickup.notifications import templates

logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 10

class SmtpMailer:
    def __init__(self, host: str, port: int, user: str, password: str, sender: Optional[str] = None):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user

    def send(self, to_addr: str, subject: str, text: str) -> None:
        """Envoi synchrone via SMTP over SSL (à appeler hors boucle async)."""
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to_addr
        msg["Subject"] = subject
        msg.set_content(text)

        context = ssl.create_default_context()
        with smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=SMTP_TIMEOUT) as server:
            server.login(self.user, self.password)
            server.send_message(msg)

def get_mailer() -> Optional[SmtpMailer]:
    if not config.SMTP_USER or not config.SMTP_PASS:
        return None
    return SmtpMailer(config.SMTP_HOST, config.SMTP_PORT, config.SMTP_USER, config.SMTP_PASS)

def admin_address() -> str:
    return config.ADMIN_EMAIL or config.SMTP_USER

async def notify_booking_paid(booking: Booking) -> Dict[str, bool]:
    """
    Envoie les deux emails de confirmation d'une réservation payée.
    - L'échec de l'un n'empêche pas l'autre; les erreurs sont journalisées, jamais propagées.
    Retour: {"customer": bool, "admin": bool} (True = envoyé).
    """
    result = {"customer": False, "admin": False}
    mailer = get_mailer()
    if mailer is None:
        logger.info("Mailer not configured. Missing SMTP_USER or SMTP_PASS. bookingId=%s", booking.booking_id)
        return result

    if booking.email:
        subject, text = templates.customer_confirmation(booking)
        try:
            await asyncio.to_thread(mailer.send, booking.email, subject, text)
            result["customer"] = True
            logger.info("Customer email sent to=%s bookingId=%s", booking.email, booking.booking_id)
        except Exception:
            logger.exception("Customer email FAILED bookingId=%s", booking.booking_id)
    else:
        logger.warning("Customer email skipped (no address) bookingId=%s", booking.booking_id)

    to_admin = admin_address()
    subject, text = templates.admin_notification(booking)
    try:
        await asyncio.to_thread(mailer.send, to_admin, subject, text)
        result["admin"] = True
        logger.info("Admin email sent to=%s bookingId=%s", to_admin, booking.booking_id)
    except Exception:
        logger.exception("Admin email FAILED bookingId=%s", booking.booking_id)
    return result
