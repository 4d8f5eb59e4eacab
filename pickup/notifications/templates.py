"""
Gabarits texte des emails de confirmation.
"""
from typing import Tuple

from pickup.bookings.models import Booking

TIME_NOT_PROVIDED = "(time not provided)"

def pickup_time(booking: Booking) -> str:
    return booking.pickup_date_time_iso or TIME_NOT_PROVIDED

def format_dollars(amount_cents: int) -> str:
    return f"${amount_cents / 100:.2f}"

def customer_confirmation(booking: Booking) -> Tuple[str, str]:
    """(sujet, corps) de l'email envoyé au client après paiement."""
    subject = "I TURN IN Pickup Confirmed"
    text = (
        f"Your pickup is scheduled for {pickup_time(booking)}.\n"
        f"Address: {booking.address}\n"
        f"Notes: {booking.notes or '(none)'}"
    )
    return subject, text

def admin_notification(booking: Booking) -> Tuple[str, str]:
    """(sujet, corps) de l'email envoyé à l'administrateur."""
    name = " ".join(p for p in (booking.first_name, booking.last_name) if p)
    subject = "✅ New Pickup Booked (Paid)"
    text = (
        "NEW PAID PICKUP\n"
        "\n"
        f"Name: {name}\n"
        f"Email: {booking.email or ''}\n"
        f"Phone: {booking.phone or ''}\n"
        f"Address: {booking.address}\n"
        f"Time: {pickup_time(booking)}\n"
        f"Total: {format_dollars(booking.amount_cents)}\n"
        "\n"
        f"BookingId: {booking.booking_id}"
    )
    return subject, text
